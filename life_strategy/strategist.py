# ABOUTME: Strategy models (Gemini streaming via google-genai, canned demo) and the relay that streams their text.
# ABOUTME: stream_strategy() yields text deltas in order, appends an error notice on failure, and logs telemetry.

import asyncio
import logging
import re
import time
from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing

from google import genai
from google.genai import types

from core.config import (
    DEMO_CHUNK_DELAY_SECONDS,
    DEMO_CHUNK_SIZE,
    GEMINI_MODEL,
    MAX_OUTPUT_TOKENS,
)
from core.telemetry import log_run
from life_strategy.goals import GOALS_END_MARKER, GOALS_START_MARKER
from life_strategy.prompt import build_prompt, system_instruction

# Appended to the body when generation fails after streaming started; clients treat it as a failed run.
STREAM_ERROR_NOTICE = "\n\nError generating strategy: "


def stream_error_message(text: str) -> str | None:
    """The error message if the accumulated stream ended with the in-band notice, else None.

    The notice message is always a single line, so a notice followed by more lines is model prose.
    """
    index = text.rfind(STREAM_ERROR_NOTICE)
    if index == -1:
        return None
    message = text[index + len(STREAM_ERROR_NOTICE) :]
    if "\n" in message:
        return None
    return message


def stream_failed(text: str) -> bool:
    """True if an accumulated stream ended with the in-band error notice."""
    return stream_error_message(text) is not None


class GeminiStrategyModel:
    """Streams one Gemini generation. Token usage is read from the last chunk that reports it."""

    def __init__(self, api_key: str, model: str = GEMINI_MODEL, max_output_tokens: int = MAX_OUTPUT_TOKENS):
        self.name = model
        self._client = genai.Client(api_key=api_key)
        self._max_output_tokens = max_output_tokens
        self.prompt_tokens = 0
        self.completion_tokens = 0

    async def stream_text(self, system_prompt: str, user_prompt: str) -> AsyncIterator[str]:
        stream = await self._client.aio.models.generate_content_stream(
            model=self.name,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                max_output_tokens=self._max_output_tokens,
            ),
        )
        async for chunk in stream:
            if chunk.usage_metadata:
                self.prompt_tokens = chunk.usage_metadata.prompt_token_count or 0
                self.completion_tokens = chunk.usage_metadata.candidates_token_count or 0
            if chunk.text:
                yield chunk.text


_NAME_LINE = re.compile(r"^- Name: (.+)$", re.MULTILINE)

DEMO_STRATEGY = """# {possessive} Life Strategy

## Executive Summary
This is a demo strategy for **{name}**. It was generated without calling a model so the full flow can be exercised end to end.

## Health & Wellness Strategy
- Walk at least **8,000 steps** a day.
- Keep a consistent sleep schedule of 7-8 hours.

## Career & Skills Strategy
- Block two hours a week for deliberate skill practice.

## Financial Strategy
1. Build a three-month emergency fund.
2. Automate a monthly transfer into savings.

## Happiness & Fulfillment Strategy
- Schedule one activity that brings you joy every week.

## 90-Day Action Plan
1. Set up step tracking on your phone.
2. Open a high-yield savings account.
3. Review progress every Sunday.

## Key Mindset Shifts
- Progress over perfection.

{start}
{{"goals": [{{"id": "goal-1", "category": "fitness", "title": "Walk more every day", "metric": "daily steps", "unit": "steps/day", "currentValue": 4000, "targetValue": 8000, "deadline": "2026-12-31", "trackingSources": ["apple_health", "fitbit"]}}, {{"id": "goal-2", "category": "finance", "title": "Build an emergency fund", "metric": "savings balance", "unit": "USD", "currentValue": 1000, "targetValue": 10000, "trackingSources": ["bank_account"]}}]}}
{end}
"""


class DemoStrategyModel:
    """Streams a canned strategy in fixed-size chunks, addressed to the name found in the prompt."""

    def __init__(self, chunk_size: int = DEMO_CHUNK_SIZE, delay_seconds: float = DEMO_CHUNK_DELAY_SECONDS):
        self.name = "demo"
        self._chunk_size = max(1, chunk_size)
        self._delay_seconds = delay_seconds
        self.prompt_tokens = 0
        self.completion_tokens = 0

    def render(self, user_prompt: str) -> str:
        match = _NAME_LINE.search(user_prompt)
        name = match.group(1).strip() if match else ""
        if not name or name == "Not provided":
            name, possessive = "you", "Your"
        else:
            possessive = f"{name}'s"
        return DEMO_STRATEGY.format(
            name=name, possessive=possessive, start=GOALS_START_MARKER, end=GOALS_END_MARKER
        )

    async def stream_text(self, system_prompt: str, user_prompt: str) -> AsyncIterator[str]:
        text = self.render(user_prompt)
        for i in range(0, len(text), self._chunk_size):
            await asyncio.sleep(self._delay_seconds)
            yield text[i : i + self._chunk_size]


async def stream_strategy(model, answers: Mapping[str, str]) -> AsyncIterator[str]:
    """Relay the model's text deltas for these answers. Failures become a trailing error notice.

    Cancellation (client disconnect) is not caught, so it propagates into the provider call.
    """
    start = time.perf_counter()
    chunks = 0
    characters = 0
    success = False
    try:
        async with aclosing(model.stream_text(system_instruction(), build_prompt(answers))) as deltas:
            async for delta in deltas:
                chunks += 1
                characters += len(delta)
                yield delta
        success = True
    except Exception as e:
        logging.exception("strategy generation failed after %d chunks", chunks)
        message = " ".join(str(e).split()) or type(e).__name__
        yield f"{STREAM_ERROR_NOTICE}{message}"
    finally:
        log_run(
            model=model.name,
            latency_ms=(time.perf_counter() - start) * 1000,
            chunks=chunks,
            characters=characters,
            prompt_tokens=model.prompt_tokens,
            completion_tokens=model.completion_tokens,
            success=success,
        )
