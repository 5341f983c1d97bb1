# ABOUTME: Pydantic models for the goal contract and request bodies, plus Answers parsing.
# ABOUTME: parse_answers turns a raw request body into a flat str->str mapping or raises ValueError.

import json
from typing import Any

from pydantic import BaseModel, Field


class Goal(BaseModel):
    """Trackable goal emitted by the model in the goals JSON block."""

    id: str = Field(description="Unique within one strategy.")
    category: str = Field(description="e.g. health, fitness, finance, career.")
    title: str
    metric: str
    unit: str
    currentValue: float
    targetValue: float
    deadline: str | None = Field(default=None, description="ISO date.")
    trackingSources: list[str] = Field(default_factory=list)


class StrategyCreateRequest(BaseModel):
    answers: dict[str, str] = Field(default_factory=dict)


class StrategyTextRequest(BaseModel):
    text: str


class CompleteStrategyRequest(BaseModel):
    answers: dict[str, str] = Field(default_factory=dict)
    strategy_text: str
    goals: list[Goal] = Field(default_factory=list)


def parse_answers(body: bytes | str) -> dict[str, str]:
    """Parse a request body into Answers. Raises ValueError with a client-facing message.

    The body must be a JSON object whose values are strings; null values are treated as absent.
    """
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValueError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object of answers")
    answers: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"Answer '{key}' must be a string")
        answers[key] = value
    return answers
