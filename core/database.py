# ABOUTME: SQLModel Strategy table and SQLite session factory.
# ABOUTME: get_session yields a session; init_db creates the schema on first use.

import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Session, SQLModel, create_engine

_db_path = os.environ.get("STRATEGIES_DB_PATH", "strategies.db")


class Strategy(SQLModel, table=True):
    """Saved life strategy. Owned by exactly one user identity."""

    __tablename__ = "strategies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True)
    answers: str  # JSON object of questionnaire answers
    strategy_text: Optional[str] = None
    goals: Optional[str] = None  # JSON array of goal objects
    is_complete: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


_engine = create_engine(
    f"sqlite:///{_db_path}",
    connect_args={"check_same_thread": False},
)


def init_db() -> None:
    """Create all tables if they do not exist."""
    SQLModel.metadata.create_all(_engine)


@contextmanager
def get_session():
    """Yield an SQLite session for the default engine."""
    init_db()
    with Session(_engine) as session:
        yield session
