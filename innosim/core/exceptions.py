"""Custom exceptions for the storage simulator."""
from typing import Optional


class DbException(Exception):
    """Base exception for storage-engine errors."""
    pass


class DuplicateKeyError(DbException):
    """Raised when a primary key already exists on the target leaf page."""

    def __init__(self, key: int, page_id: Optional[int] = None):
        super().__init__(f"Duplicate Key Error: ID {key} exists.")
        self.key = key
        self.page_id = page_id


class InvalidQueryError(DbException):
    """Raised when a query request cannot be simulated."""
    pass
