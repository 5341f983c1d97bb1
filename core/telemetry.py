# ABOUTME: Strategy generation telemetry: structured JSON log line and cost calculation.
# ABOUTME: Gemini 2.5 Flash pricing: $0.075/1M input, $0.30/1M output.

import json
from dataclasses import dataclass
from datetime import datetime, timezone


# Gemini 2.5 Flash pricing per 1M tokens (USD)
INPUT_COST_PER_1M = 0.075
OUTPUT_COST_PER_1M = 0.30


def estimate_cost_usd(prompt_tokens: int, completion_tokens: int) -> float:
    """Estimate cost in USD for Gemini 2.5 Flash."""
    return (prompt_tokens / 1_000_000) * INPUT_COST_PER_1M + (
        completion_tokens / 1_000_000
    ) * OUTPUT_COST_PER_1M


@dataclass
class TelemetryLogEntry:
    """Structured telemetry entry for one streamed generation."""

    timestamp: str
    model: str
    latency_ms: float
    chunks: int
    characters: int
    prompt_tokens: int
    completion_tokens: int
    estimated_cost_usd: float
    success: bool

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "model": self.model,
                "latency_ms": round(self.latency_ms, 2),
                "chunks": self.chunks,
                "characters": self.characters,
                "prompt_tokens": self.prompt_tokens,
                "completion_tokens": self.completion_tokens,
                "estimated_cost_usd": f"{self.estimated_cost_usd:.6f}",
                "success": self.success,
            }
        )


def log_run(
    *,
    model: str,
    latency_ms: float,
    chunks: int,
    characters: int,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool,
) -> None:
    """Print a structured JSON log line to stdout for one generation."""
    entry = TelemetryLogEntry(
        timestamp=datetime.now(tz=timezone.utc).isoformat(),
        model=model,
        latency_ms=latency_ms,
        chunks=chunks,
        characters=characters,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        estimated_cost_usd=estimate_cost_usd(prompt_tokens, completion_tokens),
        success=success,
    )
    print(entry.to_json(), flush=True)
