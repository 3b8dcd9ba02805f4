from .snapshot import summarize_pages, build_analysis_prompt, STATUS_FULL, STATUS_HAS_SPACE
from .explainer import StateAnalyst, TextGenerator

__all__ = [
    "summarize_pages",
    "build_analysis_prompt",
    "STATUS_FULL",
    "STATUS_HAS_SPACE",
    "StateAnalyst",
    "TextGenerator",
]
