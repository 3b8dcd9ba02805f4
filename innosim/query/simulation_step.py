from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StepType(Enum):
    START = "START"
    SCAN_PAGE = "SCAN_PAGE"
    FOUND_INDEX_ENTRY = "FOUND_INDEX_ENTRY"
    JUMP_TO_PK = "JUMP_TO_PK"
    FOUND_DATA = "FOUND_DATA"
    FINISHED = "FINISHED"

    def is_terminal(self) -> bool:
        return self in (StepType.FOUND_DATA, StepType.FINISHED)


class QueryKind(Enum):
    """Query shapes the simulator can trace."""
    BY_ID = "BY_ID"
    BY_NAME = "BY_NAME"
    BY_NAME_COVERING = "BY_NAME_COVERING"


@dataclass(frozen=True)
class SimulationStep:
    """
    One unit of query execution.

    ``target_page_id`` is 0 when the step is not tied to a page.
    """
    step_id: int
    message: str
    target_page_id: int
    step_type: StepType
    target_record_id: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.step_type.is_terminal()

    def to_dict(self) -> dict:
        return {
            "stepId": self.step_id,
            "message": self.message,
            "targetPageId": self.target_page_id,
            "targetRecordId": self.target_record_id,
            "type": self.step_type.value,
        }
