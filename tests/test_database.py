# ABOUTME: Pytest tests for the Strategy SQLModel and owner-scoped store operations on in-memory SQLite.
# ABOUTME: Verifies create, save text, complete save, ownership checks and newest-first listing.

import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from core.database import Strategy
from core.schemas import Goal
from core.strategy_store import (
    StrategyNotFoundError,
    create_strategy,
    get_strategy,
    list_user_strategies,
    save_anonymous_strategy,
    save_strategy_text,
    strategy_to_json,
)


@pytest.fixture
def in_memory_engine():
    """Engine for in-memory SQLite; one DB per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(in_memory_engine):
    """Yield a session that uses the in-memory engine."""
    with Session(in_memory_engine) as session:
        yield session


def test_create_strategy_is_incomplete(session):
    strategy_id = create_strategy(session, "user_a", {"name": "Alice"})

    read = session.get(Strategy, strategy_id)
    assert read is not None
    assert read.user_id == "user_a"
    assert json.loads(read.answers) == {"name": "Alice"}
    assert read.strategy_text is None
    assert read.is_complete is False


def test_save_strategy_text_marks_complete(session):
    strategy_id = create_strategy(session, "user_a", {})

    saved = save_strategy_text(session, strategy_id, "user_a", "# Plan")

    assert saved.strategy_text == "# Plan"
    assert saved.is_complete is True


def test_save_strategy_text_for_other_user_is_not_found(session):
    strategy_id = create_strategy(session, "user_a", {})
    with pytest.raises(StrategyNotFoundError):
        save_strategy_text(session, strategy_id, "user_b", "hijack")
    assert session.get(Strategy, strategy_id).strategy_text is None


def test_save_strategy_text_missing_id_is_not_found(session):
    with pytest.raises(StrategyNotFoundError):
        save_strategy_text(session, uuid4(), "user_a", "text")


def test_get_strategy_checks_owner(session):
    strategy_id = create_strategy(session, "user_a", {})
    assert get_strategy(session, strategy_id, "user_a") is not None
    assert get_strategy(session, strategy_id, "user_b") is None
    assert get_strategy(session, uuid4(), "user_a") is None


def test_save_anonymous_strategy_stores_goals(session):
    goal = Goal(
        id="goal-1",
        category="finance",
        title="Emergency fund",
        metric="savings",
        unit="USD",
        currentValue=1000,
        targetValue=10000,
        trackingSources=["bank_account"],
    )
    strategy_id = save_anonymous_strategy(session, "user_a", {"name": "A"}, "# Plan", [goal])

    data = strategy_to_json(get_strategy(session, strategy_id, "user_a"))
    assert data["is_complete"] is True
    assert data["strategy_text"] == "# Plan"
    assert data["answers"] == {"name": "A"}
    assert data["goals"][0]["title"] == "Emergency fund"
    assert "deadline" not in data["goals"][0]


def test_list_user_strategies_newest_first_and_scoped(session):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i in range(3):
        session.add(
            Strategy(user_id="user_a", answers="{}", strategy_text=f"s{i}", created_at=base + timedelta(days=i))
        )
    session.add(Strategy(user_id="user_b", answers="{}", strategy_text="other"))
    session.commit()

    strategies, total = list_user_strategies(session, "user_a", limit=10)
    assert total == 3
    assert [s.strategy_text for s in strategies] == ["s2", "s1", "s0"]

    page, total = list_user_strategies(session, "user_a", limit=2, offset=1)
    assert total == 3
    assert [s.strategy_text for s in page] == ["s1", "s0"]
