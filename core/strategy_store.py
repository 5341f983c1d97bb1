# ABOUTME: Owner-scoped operations on saved strategies (create, save text, get, save complete, list).
# ABOUTME: Ownership mismatch is reported exactly like a missing record so ids never leak existence.

import json
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from core.database import Strategy
from core.schemas import Goal


class StrategyNotFoundError(LookupError):
    """No strategy with that id is visible to the caller."""


def strategy_to_json(strategy: Strategy) -> dict:
    """Serialize a Strategy row to the dict shape returned by the API."""
    return {
        "id": str(strategy.id),
        "answers": json.loads(strategy.answers) if strategy.answers else {},
        "strategy_text": strategy.strategy_text,
        "goals": json.loads(strategy.goals) if strategy.goals else [],
        "is_complete": strategy.is_complete,
        "created_at": strategy.created_at.isoformat(),
    }


def create_strategy(session: Session, user_id: str, answers: dict[str, str]) -> UUID:
    """Insert an incomplete strategy for user_id and return its id."""
    strategy = Strategy(user_id=user_id, answers=json.dumps(answers), is_complete=False)
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy.id


def get_strategy(session: Session, strategy_id: UUID, user_id: str) -> Strategy | None:
    """Return the strategy if it exists and belongs to user_id, else None."""
    strategy = session.get(Strategy, strategy_id)
    if strategy is None or strategy.user_id != user_id:
        return None
    return strategy


def save_strategy_text(
    session: Session, strategy_id: UUID, user_id: str, text: str
) -> Strategy:
    """Store the generated text and mark the strategy complete."""
    strategy = get_strategy(session, strategy_id, user_id)
    if strategy is None:
        raise StrategyNotFoundError(str(strategy_id))
    strategy.strategy_text = text
    strategy.is_complete = True
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


def save_anonymous_strategy(
    session: Session,
    user_id: str,
    answers: dict[str, str],
    text: str,
    goals: list[Goal],
) -> UUID:
    """Insert a complete strategy in one shot (generated before sign-in, saved after)."""
    strategy = Strategy(
        user_id=user_id,
        answers=json.dumps(answers),
        strategy_text=text,
        goals=json.dumps([g.model_dump(exclude_none=True) for g in goals]),
        is_complete=True,
    )
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy.id


def list_user_strategies(
    session: Session, user_id: str, limit: int, offset: int = 0
) -> tuple[list[Strategy], int]:
    """Return (page of user's strategies newest first, total count)."""
    total_stmt = (
        select(func.count()).select_from(Strategy).where(Strategy.user_id == user_id)
    )
    total = session.exec(total_stmt).one()
    stmt = (
        select(Strategy)
        .where(Strategy.user_id == user_id)
        .order_by(Strategy.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(session.exec(stmt)), total
