# ABOUTME: FastAPI app: POST /api/strategy (rate-limited streaming generation) and /strategies (owner-scoped persistence).
# ABOUTME: 429 over the hourly budget, 400 on bad answers, 500 when the model key is missing; stream errors are in-band.

import logging
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError

from core.auth import get_current_identity, get_optional_identity
from core.config import (
    CORS_ORIGINS,
    DEFAULT_STRATEGIES_PAGE_SIZE,
    GEMINI_API_KEY,
    MAX_STRATEGIES_PAGE_SIZE,
    RATE_LIMIT_DISABLED,
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    STRATEGY_DEMO_MODE,
)
from core.database import get_session
from core.network import get_client_ip
from core.rate_limit import get_rate_limiter, rate_limit_key
from core.schemas import (
    CompleteStrategyRequest,
    StrategyCreateRequest,
    StrategyTextRequest,
    parse_answers,
)
from core.strategy_store import (
    StrategyNotFoundError,
    create_strategy,
    get_strategy,
    list_user_strategies,
    save_anonymous_strategy,
    save_strategy_text,
    strategy_to_json,
)
from life_strategy.strategist import DemoStrategyModel, GeminiStrategyModel, stream_strategy

app = FastAPI(title="AI Life Strategist API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Content-Type-Options": "nosniff",
}


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _strategy_model():
    """Pick the demo model or Gemini from configuration; never from the request."""
    if STRATEGY_DEMO_MODE:
        return DemoStrategyModel()
    return GeminiStrategyModel(api_key=GEMINI_API_KEY)


@app.post("/api/strategy")
async def post_strategy(
    request: Request, identity: str | None = Depends(get_optional_identity)
):
    """Stream a life strategy for the posted answers as text/plain."""
    peer = request.client.host if request.client else None
    key = rate_limit_key(identity, get_client_ip(request.headers, peer))
    if not RATE_LIMIT_DISABLED:
        limiter = get_rate_limiter()
        allowed = limiter is None or await run_in_threadpool(limiter.check_and_increment, key)
        if not allowed:
            return _error(
                429,
                f"Too many requests. You can generate up to {RATE_LIMIT_REQUESTS} strategies per hour.",
                headers={"Retry-After": str(RATE_LIMIT_WINDOW_SECONDS)},
            )

    if not STRATEGY_DEMO_MODE and not GEMINI_API_KEY:
        return _error(500, "GEMINI_API_KEY is not configured")

    try:
        answers = parse_answers(await request.body())
    except ValueError as e:
        return _error(400, str(e))

    return StreamingResponse(
        stream_strategy(_strategy_model(), answers),
        media_type="text/plain",
        headers=_STREAM_HEADERS,
    )


@app.post("/strategies", status_code=201)
def post_strategies(
    req: StrategyCreateRequest, identity: str = Depends(get_current_identity)
):
    """Create an incomplete strategy for the caller; text is attached later via PUT /strategies/{id}/text."""
    try:
        with get_session() as session:
            strategy_id = create_strategy(session, identity, req.answers)
        return {"id": str(strategy_id)}
    except SQLAlchemyError:
        logging.exception("post_strategies failed (database error)")
        return _error(500, "Could not create strategy.")


@app.post("/strategies/complete", status_code=201)
def post_complete_strategy(
    req: CompleteStrategyRequest, identity: str = Depends(get_current_identity)
):
    """Save answers, generated text and goals in one shot (strategy generated before sign-in)."""
    try:
        with get_session() as session:
            strategy_id = save_anonymous_strategy(
                session, identity, req.answers, req.strategy_text, req.goals
            )
        return {"id": str(strategy_id)}
    except SQLAlchemyError:
        logging.exception("post_complete_strategy failed (database error)")
        return _error(500, "Could not save strategy.")


@app.put("/strategies/{strategy_id}/text")
def put_strategy_text(
    strategy_id: UUID,
    req: StrategyTextRequest,
    identity: str = Depends(get_current_identity),
):
    """Attach generated text to the caller's strategy and mark it complete."""
    try:
        with get_session() as session:
            strategy = save_strategy_text(session, strategy_id, identity, req.text)
            return {"id": str(strategy.id), "is_complete": strategy.is_complete}
    except StrategyNotFoundError:
        return _error(404, "Strategy not found.")
    except SQLAlchemyError:
        logging.exception("put_strategy_text failed (database error)")
        return _error(500, "Could not save strategy text.")


@app.get("/strategies")
def get_strategies(
    limit: int = Query(DEFAULT_STRATEGIES_PAGE_SIZE, ge=0, le=MAX_STRATEGIES_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    identity: str = Depends(get_current_identity),
):
    """List the caller's strategies, newest first. Returns { strategies: [...], total: N }."""
    try:
        with get_session() as session:
            strategies, total = list_user_strategies(session, identity, limit, offset)
            return {
                "strategies": [strategy_to_json(s) for s in strategies],
                "total": total,
            }
    except SQLAlchemyError:
        logging.exception("get_strategies failed (database error)")
        return _error(500, "Could not load strategies.")


@app.get("/strategies/{strategy_id}")
def get_strategy_by_id(
    strategy_id: UUID, identity: str = Depends(get_current_identity)
):
    """Return one of the caller's strategies. Someone else's strategy is reported as not found."""
    try:
        with get_session() as session:
            strategy = get_strategy(session, strategy_id, identity)
            if strategy is None:
                return _error(404, "Strategy not found.")
            return strategy_to_json(strategy)
    except SQLAlchemyError:
        logging.exception("get_strategy_by_id failed (database error)")
        return _error(500, "Could not load strategy.")
