from .exceptions import (
    DbException,
    DuplicateKeyError,
    InvalidQueryError,
)

__all__ = [
    "DbException",
    "DuplicateKeyError",
    "InvalidQueryError",
]
