"""
LEAF-LEVEL STORAGE FOR A CLUSTERED TABLE

Two indexes share one arena of pages:

    PRIMARY (clustered, ordered by id)
    ┌─────────┐    ┌─────────┐    ┌─────────┐
    │ Page 1  │ ⇄  │ Page 3  │ ⇄  │ Page 6  │
    │ 1 2 3   │    │ 4 5     │    │ 9 12    │
    └─────────┘    └─────────┘    └─────────┘

    SECONDARY (ordered by name, then id)
    ┌──────────────┐    ┌──────────────┐
    │ Page 2       │ ⇄  │ Page 4       │
    │ Alice:1 ...  │    │ Dave:4 ...   │
    └──────────────┘    └──────────────┘

A secondary entry stores only (value, id); reading the full row means a
second walk of the clustered chain (a table lookup) unless the query is
covered by the secondary index.

Pages never hold more than the configured capacity once an insert has
finished. A page that overflows is split and its upper half moves to a new
page linked directly after it.
"""
from .page import Record, IndexType, LeafPage
from .event_log import EventLog, LogEntry, LogKind
from .engine import (
    EngineState,
    DisplayHints,
    IndexEngine,
    initialize_engine,
    insert_record,
    reset_engine,
    random_record,
)

__all__ = [
    "Record",
    "IndexType",
    "LeafPage",
    "EventLog",
    "LogEntry",
    "LogKind",
    "EngineState",
    "DisplayHints",
    "IndexEngine",
    "initialize_engine",
    "insert_record",
    "reset_engine",
    "random_record",
]
