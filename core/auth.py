# ABOUTME: JWT creation/validation for API auth; identities come from the token subject.
# ABOUTME: get_current_identity (401 when missing) and get_optional_identity (None when missing) dependencies.

from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY

_http_bearer = HTTPBearer(auto_error=False)


def create_access_token(subject: str) -> str:
    """Build a JWT with sub=subject and exp set from ACCESS_TOKEN_EXPIRE_MINUTES."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(subject), "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str | None:
    """Decode the JWT and return the subject (user identity) or None if invalid/expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        return None
    return sub


def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_http_bearer),
) -> str | None:
    """FastAPI dependency: return the caller identity, or None when anonymous or the token is bad."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_http_bearer),
) -> str:
    """FastAPI dependency: require Authorization Bearer token and return the identity or 401."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    identity = decode_access_token(credentials.credentials)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
