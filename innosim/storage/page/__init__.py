from .record import Record
from .index_type import IndexType, SortKey
from .leaf_page import LeafPage

__all__ = ["Record", "IndexType", "SortKey", "LeafPage"]
