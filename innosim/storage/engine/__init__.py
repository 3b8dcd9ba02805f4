from .engine_state import EngineState, DisplayHints
from .index_engine import (
    IndexEngine,
    initialize_engine,
    insert_record,
    reset_engine,
    random_record,
)

__all__ = [
    "EngineState",
    "DisplayHints",
    "IndexEngine",
    "initialize_engine",
    "insert_record",
    "reset_engine",
    "random_record",
]
