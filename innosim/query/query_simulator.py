from typing import List, Optional, Tuple, Union

from cachetools import LRUCache

from innosim.core.exceptions import InvalidQueryError
from innosim.storage.engine import EngineState
from innosim.storage.page import IndexType, LeafPage
from innosim.utils.logging import get_logger

from .simulation_step import QueryKind, SimulationStep, StepType

logger = get_logger(__name__)

QueryParam = Union[int, str]


class _StepRecorder:
    """Numbers steps in the order they are emitted."""

    def __init__(self):
        self.steps: List[SimulationStep] = []

    def add(self, message: str, page_id: int, step_type: StepType,
            record_id: Optional[int] = None) -> SimulationStep:
        step = SimulationStep(len(self.steps), message, page_id, step_type, record_id)
        self.steps.append(step)
        return step


class QuerySimulator:
    """
    Produces a replayable trace of how a SELECT walks the leaf chains.

    The simulator only reads the snapshot it was built with. Traces are
    cached per (query kind, parameter), so callers must build a new
    simulator for every new engine state.
    """

    def __init__(self, state: EngineState, cache_size: int = 128):
        self.state = state
        self._traces: LRUCache[Tuple[QueryKind, QueryParam], Tuple[SimulationStep, ...]] = \
            LRUCache(maxsize=cache_size)

    def simulate(self, kind: Union[QueryKind, str], param: QueryParam) -> List[SimulationStep]:
        """
        Trace a query against the snapshot.

        Args:
            kind: query shape, as a ``QueryKind`` or its name
            param: primary key for BY_ID, exact name otherwise

        Returns:
            List[SimulationStep]: steps in execution order; the last step
            is always the only terminal one

        Raises:
            InvalidQueryError: for an unknown kind or a non-integer id
        """
        kind = self._parse_kind(kind)
        param = self._parse_param(kind, param)

        cache_key = (kind, param)
        cached = self._traces.get(cache_key)
        if cached is not None:
            return list(cached)

        recorder = _StepRecorder()
        if kind is QueryKind.BY_ID:
            self._simulate_by_id(recorder, param)
        else:
            self._simulate_by_name(recorder, param,
                                   covering=kind is QueryKind.BY_NAME_COVERING)

        logger.debug("Simulated %s(%r) in %d steps", kind.value, param, len(recorder.steps))
        self._traces[cache_key] = tuple(recorder.steps)
        return recorder.steps

    @staticmethod
    def _parse_kind(kind: Union[QueryKind, str]) -> QueryKind:
        if isinstance(kind, QueryKind):
            return kind
        try:
            return QueryKind(str(kind).upper())
        except ValueError:
            raise InvalidQueryError(f"Unknown query kind: {kind!r}")

    @staticmethod
    def _parse_param(kind: QueryKind, param: QueryParam) -> QueryParam:
        if kind is not QueryKind.BY_ID:
            return str(param)
        if isinstance(param, bool) or (isinstance(param, float) and not param.is_integer()):
            raise InvalidQueryError(f"Primary key must be an integer, got {param!r}")
        try:
            return int(param)
        except (TypeError, ValueError):
            raise InvalidQueryError(f"Primary key must be an integer, got {param!r}")

    def _simulate_by_id(self, recorder: _StepRecorder, key: int) -> None:
        recorder.add(f"QUERY: SELECT * FROM table WHERE id = {key}", 0, StepType.START)

        for page in self.state.walk(IndexType.PRIMARY):
            recorder.add(f"Scanning Primary Page {page.page_id}...",
                         page.page_id, StepType.SCAN_PAGE)

            if page.contains_id(key):
                recorder.add(f"Found Record {key} in Page {page.page_id}. Returning Data.",
                             page.page_id, StepType.FOUND_DATA, key)
                return

            # keys past this page's range can only live further right
            max_key = page.max_key()
            if page.next_page_id is None or max_key is None or max_key >= key:
                break

        recorder.add(f"Record {key} not found in Primary Index.", 0, StepType.FINISHED)

    def _simulate_by_name(self, recorder: _StepRecorder, name: str, covering: bool) -> None:
        if covering:
            query = f"SELECT id FROM table WHERE name = '{name}'"
        else:
            query = f"SELECT * FROM table WHERE name = '{name}'"
        recorder.add(f"QUERY: {query}", 0, StepType.START)

        index_page: Optional[LeafPage] = None
        found_pk: Optional[int] = None

        for page in self.state.walk(IndexType.SECONDARY):
            recorder.add(f"Scanning Secondary Index Page {page.page_id}...",
                         page.page_id, StepType.SCAN_PAGE)

            entry = page.find_by_value(name)
            if entry is not None:
                recorder.add(f"Found Index Entry ('{name}', PK: {entry.id}) in Page {page.page_id}.",
                             page.page_id, StepType.FOUND_INDEX_ENTRY, entry.id)
                index_page, found_pk = page, entry.id
                break

        if found_pk is None:
            recorder.add(f"Name '{name}' not found in Index.", 0, StepType.FINISHED)
            return

        if covering:
            recorder.add("Covering Index optimization! We only need ID. No table lookup required.",
                         index_page.page_id, StepType.FINISHED, found_pk)
            return

        recorder.add(f"Need full row data. Performing Table Lookup (回表) for PK: {found_pk}...",
                     index_page.page_id, StepType.JUMP_TO_PK, found_pk)

        # The table lookup walks the clustered chain from its head without
        # the range check used by BY_ID.
        for page in self.state.walk(IndexType.PRIMARY):
            recorder.add(f"Scanning Primary Page {page.page_id} for PK {found_pk}...",
                         page.page_id, StepType.SCAN_PAGE)
            if page.contains_id(found_pk):
                recorder.add(f"Lookup Successful: Retrieved full row for {found_pk} "
                             f"from Clustered Index.",
                             page.page_id, StepType.FOUND_DATA, found_pk)
                return

        recorder.add(f"Row for PK {found_pk} not found in Clustered Index.", 0, StepType.FINISHED)


def simulate_select_query(state: EngineState, kind: Union[QueryKind, str],
                          param: QueryParam) -> List[SimulationStep]:
    """Trace one query against ``state``."""
    return QuerySimulator(state).simulate(kind, param)
