from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from innosim.config import EngineConfig, DEFAULT_CONFIG
from innosim.storage.event_log import EventLog
from innosim.storage.page import IndexType, LeafPage


@dataclass
class DisplayHints:
    """
    Presentation-only markers left behind by the last mutating call.

    None of this is part of the data model; it is cleared by every insert.
    """
    new_records: Set[Tuple[int, int]] = field(default_factory=set)
    dirty_pages: Set[int] = field(default_factory=set)
    splitting_pages: Set[int] = field(default_factory=set)

    def clear(self) -> None:
        self.new_records.clear()
        self.dirty_pages.clear()
        self.splitting_pages.clear()


class EngineState:
    """
    Arena of leaf pages for both indexes plus the engine's event log.

    Pages are addressed by integer id; both chains share one arena and one
    page-id counter. States are treated as snapshots: the engine copies a
    state before changing it and hands back the copy.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config
        self.pages: Dict[int, LeafPage] = {}
        self.page_counter = 0
        self.log = EventLog(config.max_log_entries)
        self.hints = DisplayHints()

    def allocate_page_id(self) -> int:
        """Hand out the next page id. Ids are never reused within a state's lineage."""
        self.page_counter += 1
        return self.page_counter

    def create_page(self, index_type: IndexType, page_id: Optional[int] = None) -> LeafPage:
        if page_id is None:
            page_id = self.allocate_page_id()
        if page_id in self.pages:
            raise ValueError(f"Page {page_id} already exists")
        page = LeafPage(page_id, index_type, self.config.page_capacity)
        self.pages[page_id] = page
        return page

    def get_page(self, page_id: Optional[int]) -> Optional[LeafPage]:
        if page_id is None:
            return None
        return self.pages.get(page_id)

    def pages_of(self, index_type: IndexType) -> List[LeafPage]:
        """Pages of one index in arena (creation) order."""
        return [page for page in self.pages.values() if page.index_type is index_type]

    def head(self, index_type: IndexType) -> Optional[LeafPage]:
        """
        Head of an index chain: the page with no previous link.

        Falls back to the first page of that type if no page qualifies,
        which only happens if the links were damaged.
        """
        pages = self.pages_of(index_type)
        for page in pages:
            if page.is_head():
                return page
        return pages[0] if pages else None

    def walk(self, index_type: IndexType) -> Iterator[LeafPage]:
        """Follow next links from the head, stopping on a repeated page."""
        visited: Set[int] = set()
        current = self.head(index_type)
        while current is not None and current.page_id not in visited:
            visited.add(current.page_id)
            yield current
            current = self.get_page(current.next_page_id)

    def chain(self, index_type: IndexType) -> List[LeafPage]:
        """
        Pages of one index in chain order.

        Pages unreachable from the head are appended at the end so nothing
        disappears from view.
        """
        ordered = list(self.walk(index_type))
        seen = {page.page_id for page in ordered}
        ordered.extend(page for page in self.pages_of(index_type)
                       if page.page_id not in seen)
        return ordered

    def copy(self) -> 'EngineState':
        clone = EngineState(self.config)
        clone.pages = deepcopy(self.pages)
        clone.page_counter = self.page_counter
        clone.log = self.log.copy()
        clone.hints = deepcopy(self.hints)
        return clone

    def __repr__(self) -> str:
        return (f"EngineState(pages={len(self.pages)}, "
                f"page_counter={self.page_counter}, log={len(self.log)})")
