# ABOUTME: Resolve the caller's network address for anonymous rate limiting.
# ABOUTME: First X-Forwarded-For hop, then X-Real-IP, then the socket peer, then "unknown".

from collections.abc import Mapping


def get_client_ip(headers: Mapping[str, str], peer: str | None = None) -> str:
    """Return the client address as reported by the proxy chain, falling back to the peer."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return peer or "unknown"
