import random
from typing import Optional

from innosim.config import EngineConfig, DEFAULT_CONFIG
from innosim.core.exceptions import DuplicateKeyError
from innosim.storage.page import IndexType, LeafPage, Record
from innosim.utils.logging import get_logger

from .engine_state import EngineState

logger = get_logger(__name__)

PRIMARY_PAGE_ID = 1
SECONDARY_PAGE_ID = 2


class IndexEngine:
    """
    Insert path of a clustered index and one secondary index.

    Only the leaf level is modelled: each index is a doubly-linked chain of
    sorted pages, and a record's page is found by scanning the chain and
    peeking at the first key of the next page. A page that overflows its
    capacity is split in two and the new page is linked in after it.

    Every mutating call takes a state and returns a new one; the input state
    is left untouched so callers can keep it as a snapshot.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config

    def initialize(self) -> EngineState:
        """Fresh state with one empty page per index."""
        state = EngineState(self.config)
        state.create_page(IndexType.PRIMARY, PRIMARY_PAGE_ID)
        state.create_page(IndexType.SECONDARY, SECONDARY_PAGE_ID)
        state.page_counter = SECONDARY_PAGE_ID
        state.log.success(
            "InnoDB Engine Initialized. Created Primary Clustered Index "
            "and Secondary Index (Name).")
        return state

    def reset(self) -> EngineState:
        """Discard every page and start over from the initial layout."""
        state = self.initialize()
        state.log.warning("Engine reset. All pages discarded and page ids restarted.")
        return state

    def insert(self, state: EngineState, record_id: int, value: str) -> EngineState:
        """
        Insert ``(record_id, value)`` into both indexes.

        A duplicate primary key is logged as an error and leaves the
        clustered index unchanged, but the secondary index still receives
        the entry.

        Returns:
            EngineState: the new state; ``state`` itself is not modified
        """
        new_state = state.copy()
        new_state.hints.clear()

        record = Record(record_id, value)
        self._insert_into_index(new_state, IndexType.PRIMARY, record)
        self._insert_into_index(new_state, IndexType.SECONDARY, record)

        new_state.log.info(
            f'Transaction Committed: Inserted ({record_id}, "{value}").')
        return new_state

    def random_record(self, rng: Optional[random.Random] = None) -> Record:
        """Sample row used for auto-insert."""
        rng = rng or random
        record_id = rng.randint(1, self.config.random_id_range)
        value = rng.choice(self.config.sample_values)
        return Record(record_id, value)

    def locate_target_page(self, state: EngineState, index_type: IndexType,
                           record: Record) -> Optional[LeafPage]:
        """
        Find the leaf page a record belongs on.

        Page ranges are not stored; the upper bound of a page is the first
        key of the page after it. The record belongs on the first page whose
        successor starts with a larger key, or on the tail.
        """
        current = state.head(index_type)
        visited = set()

        while current is not None and current.page_id not in visited:
            visited.add(current.page_id)

            if current.is_tail():
                return current

            next_page = state.get_page(current.next_page_id)
            if (next_page is not None and not next_page.is_empty() and
                    next_page.first_key() > index_type.sort_key(record)):
                return current

            current = next_page

        return None

    def _insert_into_index(self, state: EngineState, index_type: IndexType,
                           record: Record) -> None:
        target = self.locate_target_page(state, index_type, record)
        if target is None:
            logger.warning("No %s page available for %s", index_type, record)
            return

        try:
            target.insert_record(record, unique=index_type is IndexType.PRIMARY)
        except DuplicateKeyError as e:
            state.log.error(str(e))
            return

        state.hints.dirty_pages.add(target.page_id)

        if target.is_overflowing():
            new_page = self._split_page(state, target)
            state.hints.splitting_pages.add(target.page_id)
            state.hints.dirty_pages.add(new_page.page_id)
            holder = new_page if record in new_page.records else target
            state.hints.new_records.add((holder.page_id, record.id))
        else:
            state.hints.new_records.add((target.page_id, record.id))

    def _split_page(self, state: EngineState, page: LeafPage) -> LeafPage:
        index_type = page.index_type
        state.log.warning(f"[{index_type}] Page {page.page_id} full. Splitting...")

        old_next = state.get_page(page.next_page_id)
        new_page = page.split(state.allocate_page_id())
        state.pages[new_page.page_id] = new_page

        if old_next is not None:
            old_next.prev_page_id = new_page.page_id

        state.log.success(
            f"[{index_type}] Split Complete. Page {page.page_id} -> Page {new_page.page_id}.")
        logger.debug("Split %s page %d: %s | %s", index_type, page.page_id,
                     page.record_ids(), new_page.record_ids())
        return new_page


_default_engine = IndexEngine()


def initialize_engine(config: Optional[EngineConfig] = None) -> EngineState:
    return IndexEngine(config).initialize() if config else _default_engine.initialize()


def insert_record(state: EngineState, record_id: int, value: str) -> EngineState:
    return IndexEngine(state.config).insert(state, record_id, value)


def reset_engine(config: Optional[EngineConfig] = None) -> EngineState:
    return IndexEngine(config).reset() if config else _default_engine.reset()


def random_record(rng: Optional[random.Random] = None,
                  config: Optional[EngineConfig] = None) -> Record:
    return IndexEngine(config or DEFAULT_CONFIG).random_record(rng)
