# ABOUTME: Shared app configuration and constants used across API and UI (core package).
# ABOUTME: Read once from the environment (.env supported); rate-limit and demo flags live here.

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_STRATEGIES_PAGE_SIZE = 20
MAX_STRATEGIES_PAGE_SIZE = 100

# Auth: SECRET_KEY must be set (e.g. in .env); no default to avoid JWT forgery in production.
_SECRET_KEY = os.environ.get("SECRET_KEY")
if not _SECRET_KEY:
    raise ValueError(
        "SECRET_KEY environment variable must be set. For local dev, add SECRET_KEY=your-secret to .env."
    )
SECRET_KEY = _SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


def _parse_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(name: str, default: float) -> float:
    raw = os.environ.get(name, str(default))
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Model provider. The key is optional at import; POST /api/strategy returns 500 when it is missing.
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
MAX_OUTPUT_TOKENS = _parse_int("MAX_OUTPUT_TOKENS", 8192)

# Demo mode streams a canned strategy instead of calling Gemini.
STRATEGY_DEMO_MODE = _parse_bool("STRATEGY_DEMO_MODE")
DEMO_CHUNK_SIZE = _parse_int("DEMO_CHUNK_SIZE", 24)
DEMO_CHUNK_DELAY_SECONDS = _parse_float("DEMO_CHUNK_DELAY_SECONDS", 0.0)

# Rate limiting: fixed window per user (or per IP when anonymous), backed by Redis.
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
RATE_LIMIT_REQUESTS = _parse_int("RATE_LIMIT_REQUESTS", 3)
RATE_LIMIT_WINDOW_SECONDS = _parse_int("RATE_LIMIT_WINDOW_SECONDS", 60 * 60)
# Operator-only switch for controlled testing; never enable in production.
RATE_LIMIT_DISABLED = _parse_bool("RATE_LIMIT_DISABLED")
REDIS_SOCKET_TIMEOUT_SECONDS = _parse_float("REDIS_SOCKET_TIMEOUT_SECONDS", 1.0)

# CORS: comma-separated origins; default allows local Streamlit UI. Set in production.
_raw_cors = os.environ.get("CORS_ORIGINS", "http://localhost:8501")
CORS_ORIGINS = [o.strip() for o in _raw_cors.split(",") if o.strip()] or [
    "http://localhost:8501"
]
