import math
from typing import List, Optional

from innosim.core.exceptions import DuplicateKeyError

from .index_type import IndexType, SortKey
from .record import Record


class LeafPage:
    """
    Leaf page of a clustered or secondary index.

    Pages live in an arena addressed by integer id; the chain is expressed
    only through ``next_page_id`` / ``prev_page_id``.
    """

    def __init__(self, page_id: int, index_type: IndexType, capacity: int = 4):
        self.page_id = page_id
        self.index_type = index_type
        self.capacity = capacity
        self.records: List[Record] = []
        self.next_page_id: Optional[int] = None
        self.prev_page_id: Optional[int] = None

    def get_num_records(self) -> int:
        return len(self.records)

    def is_empty(self) -> bool:
        return not self.records

    def is_full(self) -> bool:
        return len(self.records) >= self.capacity

    def is_overflowing(self) -> bool:
        """True while the page holds more records than it may keep after a split."""
        return len(self.records) > self.capacity

    def is_head(self) -> bool:
        return self.prev_page_id is None

    def is_tail(self) -> bool:
        return self.next_page_id is None

    def first_key(self) -> Optional[SortKey]:
        if not self.records:
            return None
        return self.index_type.sort_key(self.records[0])

    def max_key(self) -> Optional[SortKey]:
        if not self.records:
            return None
        return self.index_type.sort_key(self.records[-1])

    def contains_id(self, record_id: int) -> bool:
        return self.find_by_id(record_id) is not None

    def find_by_id(self, record_id: int) -> Optional[Record]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def find_by_value(self, value: str) -> Optional[Record]:
        """First record whose value matches exactly."""
        for record in self.records:
            if record.value == value:
                return record
        return None

    def record_ids(self) -> List[int]:
        return [record.id for record in self.records]

    def insert_record(self, record: Record, unique: bool = False) -> None:
        """
        Append a record and re-sort the page.

        Raises:
            DuplicateKeyError: if ``unique`` is set and the id is already here
        """
        if unique and self.contains_id(record.id):
            raise DuplicateKeyError(record.id, self.page_id)

        self.records.append(record)
        self.records.sort(key=self.index_type.sort_key)

    def split(self, new_page_id: int) -> 'LeafPage':
        """
        Split this page, moving the upper half to a new right sibling.

        The left page keeps ``ceil(n/2)`` records. Sibling pointers of this
        page and the new page are updated; the caller must fix the
        ``prev_page_id`` of the page that used to follow this one.
        """
        new_page = LeafPage(new_page_id, self.index_type, self.capacity)

        split_index = math.ceil(len(self.records) / 2)
        new_page.records = self.records[split_index:]
        self.records = self.records[:split_index]

        new_page.next_page_id = self.next_page_id
        new_page.prev_page_id = self.page_id
        self.next_page_id = new_page.page_id

        return new_page

    def __repr__(self) -> str:
        return (f"LeafPage(id={self.page_id}, {self.index_type}, "
                f"records={[str(r) for r in self.records]}, "
                f"prev={self.prev_page_id}, next={self.next_page_id})")
