"""
Bybit V5 request signing.

SIGNATURE:
    hex(HMAC_SHA256(secret, timestamp + api_key + recv_window + payload))

where ``payload`` is the key-sorted query string for GET requests and
the compact, key-sorted JSON body for POST requests. The exact same
string must be sent on the wire, so callers send ``payload`` verbatim.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

SIGN_TYPE = "2"


def sorted_query(params: Optional[Mapping[str, Any]]) -> str:
    """``a=1&b=2`` with keys in ascending order; None values are dropped."""
    if not params:
        return ""
    items = sorted((k, v) for k, v in params.items() if v is not None)
    return urlencode([(k, str(v)) for k, v in items])


def compact_json(body: Optional[Mapping[str, Any]]) -> str:
    if not body:
        return ""
    return json.dumps(body, sort_keys=True, separators=(",", ":"))


def sign(secret: str, timestamp: str, api_key: str, recv_window: str, payload: str) -> str:
    message = f"{timestamp}{api_key}{recv_window}{payload}"
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def timestamp_ms() -> str:
    return str(int(time.time() * 1000))


def build_headers(
    api_key: str,
    secret: str,
    payload: str,
    recv_window: int = 5000,
    timestamp: Optional[str] = None,
) -> Dict[str, str]:
    """Authentication headers of one signed request."""
    ts = timestamp or timestamp_ms()
    window = str(recv_window)
    return {
        "X-BAPI-API-KEY": api_key,
        "X-BAPI-SIGN": sign(secret, ts, api_key, window, payload),
        "X-BAPI-SIGN-TYPE": SIGN_TYPE,
        "X-BAPI-TIMESTAMP": ts,
        "X-BAPI-RECV-WINDOW": window,
        "Content-Type": "application/json",
    }
