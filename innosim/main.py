"""
Command line entry point.

    innosim demo       insert five rows, then trace one query of each kind
    innosim shell      interactive session (default)
"""

import argparse
import logging
import sys
from typing import List, Optional

from innosim.config import EngineConfig
from innosim.interface import ConsoleRenderer, Shell
from innosim.query import QueryKind, QuerySimulator
from innosim.storage.engine import IndexEngine
from innosim.utils.logging import configure_logging

DEMO_ROWS = [(1, "Alice"), (2, "Bob"), (3, "Charlie"), (4, "Dave"), (5, "Eve")]
DEMO_QUERIES = [
    (QueryKind.BY_ID, 4),
    (QueryKind.BY_NAME, "Alice"),
    (QueryKind.BY_NAME_COVERING, "Alice"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="innosim",
        description="Simulate InnoDB leaf pages, page splits and index lookups.")
    parser.add_argument("--capacity", type=int, default=4,
                        help="records per page before a split (default: 4)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="print diagnostic logging")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("demo", help="run the five-row walkthrough")
    shell = subparsers.add_parser("shell", help="start an interactive session")
    shell.add_argument("--delay", type=float, default=0.0,
                       help="seconds to pause between replayed query steps")
    return parser


def run_demo(engine: IndexEngine, renderer: ConsoleRenderer) -> None:
    renderer.print_header("InnoDB Leaf Page Simulator", "Insert walkthrough")

    state = engine.initialize()
    for record_id, value in DEMO_ROWS:
        state = engine.insert(state, record_id, value)
    renderer.render_log(state, limit=len(state.log))
    renderer.render_state(state)

    simulator = QuerySimulator(state)
    for kind, param in DEMO_QUERIES:
        renderer.print_rule(kind.value)
        renderer.render_steps(simulator.simulate(kind, param))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # engine events are already rendered from the state's own log
    configure_logging(logging.DEBUG if args.verbose else logging.CRITICAL)

    try:
        config = EngineConfig(page_capacity=args.capacity)
    except ValueError as e:
        print(f"innosim: {e}", file=sys.stderr)
        return 2

    engine = IndexEngine(config)
    renderer = ConsoleRenderer()

    if args.command == "demo":
        run_demo(engine, renderer)
    else:
        Shell(engine, renderer, step_delay=getattr(args, "delay", 0.0)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
