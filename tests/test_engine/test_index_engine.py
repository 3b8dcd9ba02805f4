import logging
import random

import pytest

from innosim.config import EngineConfig
from innosim.storage.engine import (
    IndexEngine,
    initialize_engine,
    insert_record,
    reset_engine,
    random_record,
)
from innosim.storage.event_log import LogKind
from innosim.storage.page import IndexType, Record

SCENARIO = [(1, "Alice"), (2, "Bob"), (3, "Charlie"), (4, "Dave"), (5, "Eve")]


def build_state(rows):
    state = initialize_engine()
    for record_id, value in rows:
        state = insert_record(state, record_id, value)
    return state


def chain_ids(state, index_type):
    return [page.page_id for page in state.walk(index_type)]


def chain_records(state, index_type):
    return [record for page in state.walk(index_type) for record in page.records]


def assert_links_consistent(state):
    for page in state.pages.values():
        if page.next_page_id is not None:
            assert state.pages[page.next_page_id].prev_page_id == page.page_id
        if page.prev_page_id is not None:
            assert state.pages[page.prev_page_id].next_page_id == page.page_id


class TestInitialize:
    """Tests for the initial engine layout."""

    def test_two_empty_pages(self):
        """Test that a fresh engine has one empty page per index."""
        state = initialize_engine()

        assert sorted(state.pages) == [1, 2]
        assert state.pages[1].index_type is IndexType.PRIMARY
        assert state.pages[2].index_type is IndexType.SECONDARY
        for page in state.pages.values():
            assert page.is_empty()
            assert page.next_page_id is None
            assert page.prev_page_id is None
        assert state.page_counter == 2

    def test_single_success_log_entry(self):
        """Test that initialization logs exactly one success entry."""
        state = initialize_engine()

        assert len(state.log) == 1
        entry = state.log.latest()
        assert entry.kind is LogKind.SUCCESS
        assert entry.message.startswith("InnoDB Engine Initialized.")

    def test_config_is_carried_on_state(self):
        """Test that a custom capacity reaches the pages."""
        state = initialize_engine(EngineConfig(page_capacity=2))
        assert state.config.page_capacity == 2
        assert state.pages[1].capacity == 2


class TestInsert:
    """Tests for inserting into both indexes."""

    def test_insert_into_both_indexes(self):
        """Test that one insert lands in both chains."""
        state = insert_record(initialize_engine(), 7, "Grace")

        assert state.pages[1].records == [Record(7, "Grace")]
        assert state.pages[2].records == [Record(7, "Grace")]
        assert state.log.latest().message == 'Transaction Committed: Inserted (7, "Grace").'
        assert state.log.latest().kind is LogKind.INFO

    def test_insert_does_not_modify_input_state(self):
        """Test copy-on-write: the old state remains a valid snapshot."""
        before = build_state(SCENARIO[:4])
        after = insert_record(before, 5, "Eve")

        assert len(before.pages) == 2
        assert before.pages[1].record_ids() == [1, 2, 3, 4]
        assert len(before.log) == 5
        assert len(after.pages) == 4

    def test_scenario_splits_both_indexes(self):
        """Test the five-row walkthrough: both first pages split."""
        state = build_state(SCENARIO)

        assert state.pages[1].record_ids() == [1, 2, 3]
        assert state.pages[3].index_type is IndexType.PRIMARY
        assert state.pages[3].record_ids() == [4, 5]
        assert state.pages[1].next_page_id == 3
        assert state.pages[3].prev_page_id == 1
        assert state.pages[3].next_page_id is None

        assert [r.value for r in state.pages[2].records] == ["Alice", "Bob", "Charlie"]
        assert [r.value for r in state.pages[4].records] == ["Dave", "Eve"]
        assert state.pages[2].next_page_id == 4
        assert state.pages[4].prev_page_id == 2
        assert state.page_counter == 4

    def test_split_log_messages(self):
        """Test the warning and success entries written around a split."""
        state = build_state(SCENARIO)

        assert state.log.messages()[:5] == [
            'Transaction Committed: Inserted (5, "Eve").',
            "[SECONDARY] Split Complete. Page 2 -> Page 4.",
            "[SECONDARY] Page 2 full. Splitting...",
            "[PRIMARY] Split Complete. Page 1 -> Page 3.",
            "[PRIMARY] Page 1 full. Splitting...",
        ]
        kinds = [entry.kind for entry in state.log.entries()[:5]]
        assert kinds == [LogKind.INFO, LogKind.SUCCESS, LogKind.WARNING,
                         LogKind.SUCCESS, LogKind.WARNING]

    def test_split_in_middle_of_chain_relinks_neighbour(self):
        """Test that splitting an inner page fixes the next page's back link."""
        state = build_state(SCENARIO + [(0, "Aaron"), (-1, "Abe")])

        assert chain_ids(state, IndexType.PRIMARY) == [1, 5, 3]
        assert state.pages[1].record_ids() == [-1, 0, 1]
        assert state.pages[5].record_ids() == [2, 3]
        assert state.pages[5].prev_page_id == 1
        assert state.pages[5].next_page_id == 3
        assert state.pages[3].prev_page_id == 5

        assert chain_ids(state, IndexType.SECONDARY) == [2, 6, 4]
        assert [r.value for r in state.pages[2].records] == ["Aaron", "Abe", "Alice"]
        assert [r.value for r in state.pages[6].records] == ["Bob", "Charlie"]
        assert state.pages[4].prev_page_id == 6
        assert_links_consistent(state)

    def test_locate_target_page_peeks_at_next_first_key(self):
        """Test that a record lands on the last page whose successor starts above it."""
        state = build_state(SCENARIO)
        engine = IndexEngine()

        assert engine.locate_target_page(state, IndexType.PRIMARY, Record(0, "x")).page_id == 1
        assert engine.locate_target_page(state, IndexType.PRIMARY, Record(4, "x")).page_id == 3
        assert engine.locate_target_page(state, IndexType.SECONDARY,
                                         Record(9, "Bob")).page_id == 2

    def test_locate_target_page_skips_empty_successor(self):
        """Test that an empty next page gives no bound and the walk moves on."""
        state = build_state(SCENARIO)
        state.pages[3].records = []

        target = IndexEngine().locate_target_page(state, IndexType.PRIMARY, Record(2, "x"))
        assert target.page_id == 3

    def test_duplicate_primary_key_is_logged_and_secondary_still_updated(self):
        """Test the duplicate-key quirk: only the clustered insert is skipped."""
        before = build_state(SCENARIO)
        state = insert_record(before, 3, "Zed")

        assert state.pages[1].record_ids() == [1, 2, 3]
        assert state.pages[1].find_by_id(3) == Record(3, "Charlie")
        assert sum(p.get_num_records() for p in state.pages_of(IndexType.PRIMARY)) == 5
        assert sum(p.get_num_records() for p in state.pages_of(IndexType.SECONDARY)) == 6
        assert Record(3, "Zed") in state.pages[4].records

        assert state.log.messages()[:2] == [
            'Transaction Committed: Inserted (3, "Zed").',
            "Duplicate Key Error: ID 3 exists.",
        ]
        assert state.log.entries()[1].kind is LogKind.ERROR

    def test_duplicate_is_mirrored_to_python_logging(self, caplog):
        """Test that engine events reach the innosim.engine logger."""
        state = build_state([(1, "Alice")])
        with caplog.at_level(logging.ERROR, logger="innosim.engine"):
            insert_record(state, 1, "Alice")
        assert "Duplicate Key Error: ID 1 exists." in caplog.text

    def test_secondary_accepts_duplicate_values(self):
        """Test that equal names are kept apart by primary key."""
        state = build_state([(2, "Bob"), (1, "Bob")])
        assert [(r.value, r.id) for r in state.pages[2].records] == [("Bob", 1), ("Bob", 2)]

    @pytest.mark.parametrize("seed", [0, 1, 7, 42])
    def test_random_distinct_inserts_keep_chain_invariants(self, seed):
        """Test ordering, capacity and link invariants after every insert."""
        ids = list(range(1, 61))
        random.Random(seed).shuffle(ids)

        state = initialize_engine()
        for record_id in ids:
            state = insert_record(state, record_id, f"name{record_id % 7}")

            primary_ids = [r.id for r in chain_records(state, IndexType.PRIMARY)]
            assert primary_ids == sorted(primary_ids)
            assert len(set(primary_ids)) == len(primary_ids)

            secondary_keys = [IndexType.SECONDARY.sort_key(r)
                              for r in chain_records(state, IndexType.SECONDARY)]
            assert secondary_keys == sorted(secondary_keys)

            for page in state.pages.values():
                assert page.get_num_records() <= state.config.page_capacity
            assert_links_consistent(state)

        assert len(chain_records(state, IndexType.PRIMARY)) == 60
        heads = [p for p in state.pages_of(IndexType.PRIMARY) if p.prev_page_id is None]
        assert len(heads) == 1

    def test_page_ids_strictly_increase(self):
        """Test that every split takes the next counter value."""
        state = build_state((i, f"n{i:02d}") for i in range(1, 21))
        assert sorted(state.pages) == list(range(1, state.page_counter + 1))


class TestDisplayHints:
    """Tests for the presentation side channel."""

    def test_split_marks_pages(self):
        """Test hints after the insert that triggers both splits."""
        state = build_state(SCENARIO)

        assert state.hints.splitting_pages == {1, 2}
        assert state.hints.dirty_pages == {1, 2, 3, 4}
        assert state.hints.new_records == {(3, 5), (4, 5)}

    def test_next_insert_clears_previous_hints(self):
        """Test that stale markers never survive a later insert."""
        state = insert_record(build_state(SCENARIO), 6, "Frank")

        assert state.hints.splitting_pages == set()
        assert state.hints.dirty_pages == {3, 4}
        assert state.hints.new_records == {(3, 6), (4, 6)}

    def test_pages_carry_no_display_flags(self):
        """Test that the data model carries no display flags."""
        state = build_state(SCENARIO)
        for page in state.pages.values():
            assert not hasattr(page, "is_dirty")
            assert not hasattr(page, "is_splitting")


class TestResetAndRandom:
    """Tests for reset and sample-data generation."""

    def test_reset_returns_fresh_layout(self):
        """Test that reset discards pages and restarts the counter."""
        state = reset_engine()

        assert sorted(state.pages) == [1, 2]
        assert state.page_counter == 2
        assert all(page.is_empty() for page in state.pages.values())
        assert len(state.log) == 2
        assert state.log.latest().kind is LogKind.WARNING
        assert state.log.latest().message.startswith("Engine reset.")

    def test_random_record_uses_configured_pool(self):
        """Test random rows stay within the configured id range and names."""
        rng = random.Random(3)
        config = EngineConfig(random_id_range=5, sample_values=("X", "Y"))
        for _ in range(50):
            record = random_record(rng, config)
            assert 1 <= record.id <= 5
            assert record.value in ("X", "Y")

    def test_random_record_default_pool(self):
        record = IndexEngine().random_record(random.Random(0))
        assert 1 <= record.id <= 50
        assert record.value in EngineConfig().sample_values
