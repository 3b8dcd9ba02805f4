"""
innosim: a teaching model of InnoDB leaf pages.

A clustered index and a name index are kept as doubly-linked chains of
small sorted pages. Inserts split full pages; queries are traced step by
step so the difference between a table lookup and a covering index can be
watched page by page.
"""
from .config import EngineConfig
from .storage import (
    Record,
    IndexType,
    LeafPage,
    EngineState,
    IndexEngine,
    initialize_engine,
    insert_record,
    reset_engine,
    random_record,
)
from .query import QueryKind, StepType, SimulationStep, QuerySimulator, simulate_select_query
from .analysis import summarize_pages

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "Record",
    "IndexType",
    "LeafPage",
    "EngineState",
    "IndexEngine",
    "initialize_engine",
    "insert_record",
    "reset_engine",
    "random_record",
    "QueryKind",
    "StepType",
    "SimulationStep",
    "QuerySimulator",
    "simulate_select_query",
    "summarize_pages",
]
