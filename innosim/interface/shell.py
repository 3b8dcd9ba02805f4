import random
import shlex
import time
from typing import Callable, Dict, List, Optional

from innosim.analysis import StateAnalyst
from innosim.core.exceptions import DbException
from innosim.query import QueryKind, QuerySimulator, SimulationStep
from innosim.storage.engine import EngineState, IndexEngine

from .renderer import ConsoleRenderer

QUERY_ALIASES = {
    "id": QueryKind.BY_ID,
    "name": QueryKind.BY_NAME,
    "cover": QueryKind.BY_NAME_COVERING,
    "covering": QueryKind.BY_NAME_COVERING,
}

HELP_TEXT = """\
insert ID VALUE          insert a row into both indexes
auto [N]                 insert N random rows (default 1)
query id|name|cover X    trace a SELECT by id, by name, or covered by the name index
replay                   step through the last query on the page chains
show                     draw both page chains
log [N]                  show the last N engine events (default 10)
summary                  print the page summary sent to the explanation service
explain                  ask an injected explanation service about the layout
reset                    discard all pages and start over
help                     show this message
quit                     leave the shell"""


class Shell:
    """
    Interactive front end for the engine.

    Holds the current engine state and replaces it after every insert or
    reset; queries run against whatever state is current.
    """

    PROMPT = "innosim> "

    def __init__(self, engine: Optional[IndexEngine] = None,
                 renderer: Optional[ConsoleRenderer] = None,
                 analyst: Optional[StateAnalyst] = None,
                 input_func: Callable[[str], str] = input,
                 rng: Optional[random.Random] = None,
                 step_delay: float = 0.0):
        self.engine = engine or IndexEngine()
        self.renderer = renderer or ConsoleRenderer()
        self.analyst = analyst or StateAnalyst()
        self.input_func = input_func
        self.rng = rng or random.Random()
        self.step_delay = step_delay

        self.state: EngineState = self.engine.initialize()
        self._simulator = QuerySimulator(self.state)
        self.last_steps: List[SimulationStep] = []

        self._commands: Dict[str, Callable[[List[str]], bool]] = {
            "insert": self._cmd_insert,
            "auto": self._cmd_auto,
            "query": self._cmd_query,
            "replay": self._cmd_replay,
            "show": self._cmd_show,
            "log": self._cmd_log,
            "summary": self._cmd_summary,
            "explain": self._cmd_explain,
            "reset": self._cmd_reset,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    def run(self) -> None:
        self.renderer.print_header("InnoDB Leaf Page Simulator",
                                   "Type 'help' for commands")
        while True:
            try:
                line = self.input_func(self.PROMPT)
            except (KeyboardInterrupt, EOFError):
                self.renderer.console.print()
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.renderer.print_error(f"Could not parse input: {e}")
            return True
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(command)
        if handler is None:
            self.renderer.print_error(f"Unknown command '{command}'. Type 'help'.")
            return True

        try:
            return handler(args)
        except DbException as e:
            self.renderer.print_error(str(e))
            return True

    def set_state(self, state: EngineState) -> None:
        self.state = state
        self._simulator = QuerySimulator(state)
        self.last_steps = []

    def _cmd_insert(self, args: List[str]) -> bool:
        if len(args) < 2:
            self.renderer.print_error("Usage: insert ID VALUE")
            return True
        try:
            record_id = int(args[0])
        except ValueError:
            self.renderer.print_error(f"ID must be an integer, got '{args[0]}'")
            return True
        value = " ".join(args[1:]).strip()
        if not value:
            self.renderer.print_error("VALUE must not be empty")
            return True

        before = self.state
        self.set_state(self.engine.insert(before, record_id, value))
        self.renderer.render_log(self.state, limit=self._entries_since(before))
        self.renderer.render_state(self.state)
        return True

    def _cmd_auto(self, args: List[str]) -> bool:
        try:
            count = int(args[0]) if args else 1
        except ValueError:
            self.renderer.print_error(f"Count must be an integer, got '{args[0]}'")
            return True

        for _ in range(max(count, 0)):
            record = self.engine.random_record(self.rng)
            before = self.state
            self.set_state(self.engine.insert(before, record.id, record.value))
            self.renderer.render_log(self.state, limit=self._entries_since(before))
        self.renderer.render_state(self.state)
        return True

    def _cmd_query(self, args: List[str]) -> bool:
        if len(args) < 2 or args[0].lower() not in QUERY_ALIASES:
            self.renderer.print_error("Usage: query id|name|cover PARAM")
            return True
        kind = QUERY_ALIASES[args[0].lower()]
        param = " ".join(args[1:])

        self.last_steps = self._simulator.simulate(kind, param)
        self.renderer.render_steps(self.last_steps)
        return True

    def _cmd_replay(self, args: List[str]) -> bool:
        if not self.last_steps:
            self.renderer.print_info("No query to replay. Run 'query' first.")
            return True
        for step in self.last_steps:
            self.renderer.print_rule(f"Step {step.step_id}")
            self.renderer.render_step(step)
            self.renderer.render_state(self.state, step)
            if self.step_delay:
                time.sleep(self.step_delay)
        return True

    def _cmd_show(self, args: List[str]) -> bool:
        self.renderer.render_state(self.state)
        return True

    def _cmd_log(self, args: List[str]) -> bool:
        try:
            limit = int(args[0]) if args else 10
        except ValueError:
            self.renderer.print_error(f"Count must be an integer, got '{args[0]}'")
            return True
        self.renderer.render_log(self.state, limit=limit)
        return True

    def _cmd_summary(self, args: List[str]) -> bool:
        self.renderer.render_summary(self.state)
        return True

    def _cmd_explain(self, args: List[str]) -> bool:
        self.renderer.print_info(self.analyst.analyze(self.state))
        return True

    def _cmd_reset(self, args: List[str]) -> bool:
        self.set_state(self.engine.reset())
        self.renderer.render_log(self.state, limit=2)
        return True

    def _cmd_help(self, args: List[str]) -> bool:
        self.renderer.console.print(HELP_TEXT, markup=False, highlight=False)
        return True

    def _cmd_quit(self, args: List[str]) -> bool:
        return False

    def _entries_since(self, before: EngineState) -> int:
        """Number of log entries the current state gained over ``before``."""
        latest = before.log.latest()
        entries = self.state.log.entries()
        if latest is None:
            return len(entries)
        for i, entry in enumerate(entries):
            if entry.entry_id == latest.entry_id:
                return i
        return len(entries)
