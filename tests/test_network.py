# ABOUTME: Unit tests for client address resolution used by anonymous rate limiting.
# ABOUTME: Forwarded-for first hop, then X-Real-IP, then the socket peer, then "unknown".

from core.network import get_client_ip


def test_first_forwarded_for_hop():
    assert get_client_ip({"x-forwarded-for": "1.2.3.4, 5.6.7.8"}) == "1.2.3.4"


def test_trims_forwarded_for_whitespace():
    assert get_client_ip({"x-forwarded-for": "  9.9.9.9  , 1.1.1.1"}) == "9.9.9.9"


def test_falls_back_to_real_ip():
    assert get_client_ip({"x-real-ip": "10.0.0.1"}) == "10.0.0.1"


def test_prefers_forwarded_for_over_real_ip():
    headers = {"x-forwarded-for": "192.168.1.1", "x-real-ip": "10.0.0.1"}
    assert get_client_ip(headers) == "192.168.1.1"


def test_falls_back_to_peer_then_unknown():
    assert get_client_ip({}, peer="127.0.0.1") == "127.0.0.1"
    assert get_client_ip({}) == "unknown"
    assert get_client_ip({"x-forwarded-for": " , "}) == "unknown"
