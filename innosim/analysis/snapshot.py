import json
from typing import Any, Dict, List

from innosim.storage.engine import EngineState

STATUS_FULL = "FULL"
STATUS_HAS_SPACE = "HAS_SPACE"


def summarize_pages(state: EngineState) -> List[Dict[str, Any]]:
    """
    Read-only projection of every page, in arena order.

    This is the shape handed to the explanation service. Display hints are
    deliberately left out.
    """
    capacity = state.config.page_capacity
    return [
        {
            "page_id": page.page_id,
            "records": page.record_ids(),
            "next_page": page.next_page_id,
            "prev_page": page.prev_page_id,
            "status": STATUS_FULL if page.get_num_records() >= capacity else STATUS_HAS_SPACE,
        }
        for page in state.pages.values()
    ]


def build_analysis_prompt(state: EngineState) -> str:
    """Prompt asking a language model to explain the current leaf layout."""
    pages_json = json.dumps(summarize_pages(state), indent=2)
    capacity = state.config.page_capacity
    return f"""
You are an expert Database Engineer. Analyze the following simplified InnoDB Leaf Node structure (Linked List of Pages).
State: {pages_json}

Explain the current state of the storage engine to a student.
Focus on:
1. How the data is distributed across pages.
2. The sorting order (Primary Key).
3. Any recent splits or full pages (Capacity is {capacity}).
4. The structure of the Doubly Linked List.

Keep it concise (max 3 sentences) and encouraging.
""".strip()
