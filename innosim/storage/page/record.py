from dataclasses import dataclass


@dataclass(frozen=True)
class Record:
    """
    A single row: integer primary key plus a string payload.

    The secondary index reuses this shape for its (value, id) entries, where
    ``id`` is the pointer back to the clustered row.
    """
    id: int
    value: str

    def __str__(self) -> str:
        return f"({self.id}, {self.value!r})"
