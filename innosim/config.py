from dataclasses import dataclass
from typing import Tuple


DEFAULT_SAMPLE_VALUES: Tuple[str, ...] = (
    "Alice", "Bob", "Charlie", "Dave", "Eve",
    "Frank", "Grace", "Heidi", "Ivan",
)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for the leaf-page engine."""
    page_capacity: int = 4
    max_log_entries: int = 50

    # Auto-insert sample data
    random_id_range: int = 50
    sample_values: Tuple[str, ...] = DEFAULT_SAMPLE_VALUES

    def __post_init__(self):
        if self.page_capacity < 1:
            raise ValueError(
                f"Page capacity must be positive, got {self.page_capacity}")
        if self.max_log_entries < 1:
            raise ValueError(
                f"Log size must be positive, got {self.max_log_entries}")


DEFAULT_CONFIG = EngineConfig()
