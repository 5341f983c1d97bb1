# ABOUTME: Pytest tests for goals block extraction and narrative stripping.
# ABOUTME: Malformed goal JSON must degrade to [] without raising.

import json

from life_strategy.goals import extract_goals, narrative_text

GOAL = {
    "id": "goal-1",
    "category": "fitness",
    "title": "Walk more",
    "metric": "daily steps",
    "unit": "steps/day",
    "currentValue": 4000,
    "targetValue": 8000,
    "deadline": "2026-12-31",
    "trackingSources": ["apple_health", "fitbit"],
}


def test_extracts_goals_between_markers():
    text = f"# Plan\nDo things.\n---GOALS_JSON---\n{json.dumps({'goals': [GOAL]})}\n---END_GOALS---"
    assert extract_goals(text) == [GOAL]


def test_extracts_goals_without_end_marker():
    text = f"Narrative\n---GOALS_JSON---\n{json.dumps({'goals': [GOAL]})}\n"
    assert extract_goals(text) == [GOAL]


def test_invalid_json_yields_empty_list():
    text = 'Narrative\n---GOALS_JSON---\n{"goals": [{"id": "g1",]}\n---END_GOALS---'
    assert extract_goals(text) == []


def test_truncated_stream_yields_empty_list():
    assert extract_goals('Narrative\n---GOALS_JSON---\n{"goals": [{"id"') == []


def test_no_marker_yields_empty_list():
    assert extract_goals("# Plan\nJust a narrative.") == []


def test_goals_key_missing_or_not_a_list_yields_empty_list():
    assert extract_goals('---GOALS_JSON---\n{"items": []}\n---END_GOALS---') == []
    assert extract_goals('---GOALS_JSON---\n{"goals": "none"}\n---END_GOALS---') == []
    assert extract_goals("---GOALS_JSON---\n[1, 2]\n---END_GOALS---") == []


def test_narrative_text_strips_goals_block():
    text = f"# Plan\nBody\n---GOALS_JSON---\n{json.dumps({'goals': [GOAL]})}\n---END_GOALS---"
    assert narrative_text(text) == "# Plan\nBody\n"


def test_narrative_text_without_marker_is_unchanged():
    assert narrative_text("# Plan\nBody") == "# Plan\nBody"
