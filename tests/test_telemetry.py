# ABOUTME: Pytest tests for the generation telemetry line and cost estimate.
# ABOUTME: log_run prints one JSON object per generation to stdout.

import json

from core.telemetry import estimate_cost_usd, log_run


def test_estimate_cost_usd():
    assert estimate_cost_usd(1_000_000, 0) == 0.075
    assert estimate_cost_usd(0, 1_000_000) == 0.30
    assert estimate_cost_usd(0, 0) == 0


def test_log_run_prints_json_line(capsys):
    log_run(
        model="demo",
        latency_ms=12.3456,
        chunks=3,
        characters=42,
        prompt_tokens=0,
        completion_tokens=0,
        success=True,
    )
    entry = json.loads(capsys.readouterr().out.strip())
    assert entry["model"] == "demo"
    assert entry["latency_ms"] == 12.35
    assert entry["chunks"] == 3
    assert entry["success"] is True
    assert entry["estimated_cost_usd"] == "0.000000"
