from enum import Enum
from typing import Tuple, Union

from .record import Record

SortKey = Union[int, Tuple[str, int]]


class IndexType(Enum):
    """
    The two leaf chains kept by the engine.

    PRIMARY is the clustered index ordered by primary key. SECONDARY is the
    name index ordered by value, with ties broken by primary key.
    """
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"

    def sort_key(self, record: Record) -> SortKey:
        """Key used to order records on pages of this index."""
        if self is IndexType.PRIMARY:
            return record.id
        return record.value, record.id

    def __str__(self) -> str:
        return self.value
