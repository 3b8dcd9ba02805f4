from typing import Callable, Optional

from innosim.storage.engine import EngineState
from innosim.utils.logging import get_logger

from .snapshot import build_analysis_prompt

logger = get_logger(__name__)

TextGenerator = Callable[[str], Optional[str]]

MISSING_CLIENT_MESSAGE = "API Key is missing. Cannot generate explanation."
EMPTY_RESPONSE_MESSAGE = "Could not generate analysis."
FAILURE_MESSAGE = ("Failed to connect to AI assistant. "
                   "Please check your API key or try again.")


class StateAnalyst:
    """
    Adapter around an external text-generation service.

    The service is any callable taking a prompt and returning text. The
    analyst never raises; failures come back as a readable message.
    """

    def __init__(self, generate: Optional[TextGenerator] = None):
        self.generate = generate

    def is_configured(self) -> bool:
        return self.generate is not None

    def analyze(self, state: EngineState) -> str:
        if self.generate is None:
            return MISSING_CLIENT_MESSAGE

        prompt = build_analysis_prompt(state)
        try:
            text = self.generate(prompt)
        except Exception as e:
            logger.error("Explanation service error: %s", e)
            return FAILURE_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE
