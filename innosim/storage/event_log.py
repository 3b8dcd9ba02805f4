import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterator, List, Optional

from innosim.utils.logging import get_logger

logger = get_logger("engine")


class LogKind(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    def to_logging_level(self) -> int:
        return {
            LogKind.INFO: logging.INFO,
            LogKind.SUCCESS: logging.INFO,
            LogKind.WARNING: logging.WARNING,
            LogKind.ERROR: logging.ERROR,
        }[self]


def _new_entry_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class LogEntry:
    """A timestamped, human-readable engine event."""
    message: str
    kind: LogKind = LogKind.INFO
    entry_id: str = field(default_factory=_new_entry_id)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "timestamp": self.timestamp,
            "message": self.message,
            "type": self.kind.value,
        }


class EventLog:
    """
    Bounded event log, most recent entry first.

    Once ``max_entries`` is reached the oldest entry is discarded. Every
    entry is also mirrored to the ``innosim.engine`` logger.
    """

    def __init__(self, max_entries: int = 50, entries: Optional[List[LogEntry]] = None):
        self.max_entries = max_entries
        self._entries: Deque[LogEntry] = deque(maxlen=max_entries)
        if entries:
            # entries are given newest first
            self._entries.extend(entries[:max_entries])

    def add(self, message: str, kind: LogKind = LogKind.INFO) -> LogEntry:
        entry = LogEntry(message, kind)
        self._entries.appendleft(entry)
        logger.log(kind.to_logging_level(), message)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(message, LogKind.INFO)

    def success(self, message: str) -> LogEntry:
        return self.add(message, LogKind.SUCCESS)

    def warning(self, message: str) -> LogEntry:
        return self.add(message, LogKind.WARNING)

    def error(self, message: str) -> LogEntry:
        return self.add(message, LogKind.ERROR)

    def latest(self) -> Optional[LogEntry]:
        return self._entries[0] if self._entries else None

    def entries(self) -> List[LogEntry]:
        """All entries, newest first."""
        return list(self._entries)

    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]

    def copy(self) -> 'EventLog':
        # entries are immutable, a shallow copy is enough
        return EventLog(self.max_entries, list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)
