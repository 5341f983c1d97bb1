# ABOUTME: Extract the trailing goals JSON block from streamed strategy text.
# ABOUTME: Malformed or missing goals yield []; the narrative is still usable without them.

import json
import logging
import re

GOALS_START_MARKER = "---GOALS_JSON---"
GOALS_END_MARKER = "---END_GOALS---"

logger = logging.getLogger(__name__)

_GOALS_BLOCK = re.compile(
    re.escape(GOALS_START_MARKER)
    + r"\n?(.+?)(?:\n?"
    + re.escape(GOALS_END_MARKER)
    + r"|\Z)",
    re.DOTALL,
)


def extract_goals(text: str) -> list[dict]:
    """Return the goals list embedded between the goals markers, or [] if absent or unparseable."""
    match = _GOALS_BLOCK.search(text)
    if match is None:
        return []
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError:
        logger.debug("goals block is not valid JSON; skipping goals")
        return []
    goals = payload.get("goals") if isinstance(payload, dict) else None
    if not isinstance(goals, list):
        logger.debug("goals block has no goals array; skipping goals")
        return []
    return goals


def narrative_text(text: str) -> str:
    """Return the strategy narrative with the goals block (and anything after it) removed."""
    return text.split(GOALS_START_MARKER, 1)[0]
