# ABOUTME: Life strategy domain package: prompt building, goal extraction, markdown rendering, streaming models.
# ABOUTME: Use stream_strategy() from life_strategy.strategist for API integration.

from life_strategy.goals import extract_goals, narrative_text
from life_strategy.markdown import render_markdown
from life_strategy.prompt import build_prompt
from life_strategy.strategist import stream_strategy

__all__ = [
    "build_prompt",
    "extract_goals",
    "narrative_text",
    "render_markdown",
    "stream_strategy",
]
