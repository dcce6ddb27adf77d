from __future__ import annotations

from signalgate.infrastructure.external.rate_limiter import RateLimiter
from signalgate.infrastructure.external.signing import (
    build_headers,
    compact_json,
    sign,
    sorted_query,
)


def test_sorted_query_drops_none() -> None:
    assert sorted_query({"symbol": "BTCUSDT", "category": "linear", "limit": None}) == (
        "category=linear&symbol=BTCUSDT"
    )
    assert sorted_query({}) == ""


def test_compact_json_is_sorted_and_compact() -> None:
    assert compact_json({"b": 1, "a": "x"}) == '{"a":"x","b":1}'


# hex(HMAC_SHA256("secret", '1700000000000key5000{"qty":"0.001","symbol":"BTCUSDT"}'))
KNOWN_SIGNATURE = "4de925500af8fa4b4e97e672b9056d790dca8e2d4866e379309eb27d6e6bfafc"


def test_signature_matches_known_digest() -> None:
    payload = compact_json({"symbol": "BTCUSDT", "qty": "0.001"})
    assert payload == '{"qty":"0.001","symbol":"BTCUSDT"}'
    assert sign("secret", "1700000000000", "key", "5000", payload) == KNOWN_SIGNATURE

    headers = build_headers("key", "secret", payload, recv_window=5000, timestamp="1700000000000")
    assert headers["X-BAPI-SIGN"] == KNOWN_SIGNATURE
    assert headers["X-BAPI-API-KEY"] == "key"
    assert headers["X-BAPI-TIMESTAMP"] == "1700000000000"
    assert headers["X-BAPI-RECV-WINDOW"] == "5000"
    assert headers["X-BAPI-SIGN-TYPE"] == "2"


def test_signature_changes_with_payload() -> None:
    a = sign("secret", "1", "key", "5000", "a=1")
    b = sign("secret", "1", "key", "5000", "a=2")
    assert a != b
    assert len(a) == 64


def test_rate_limiter_rolling_window() -> None:
    now = [0.0]
    limiter = RateLimiter(max_requests=3, window_seconds=10.0, clock=lambda: now[0])

    assert all(limiter.check_and_record("k") for _ in range(3))
    assert limiter.check_and_record("k") is False
    assert limiter.remaining("k") == 0

    # other credentials have their own window
    assert limiter.check_and_record("other") is True

    now[0] = 9.9
    assert limiter.check_and_record("k") is False

    now[0] = 10.0
    assert limiter.check_and_record("k") is True
    assert limiter.remaining("k") == 2
