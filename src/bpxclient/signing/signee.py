"""
Canonical signee construction.

The signee is the exact string signed with the Ed25519 key. The server rebuilds
it from the request and compares signatures, so every byte matters:

    instruction=<name>[&<query k>=<v>...][&<body k>=<v>...]&timestamp=<ms>&window=<ms>

- Query keys and body keys are each sorted in ascending code point order
  (identical to UTF-8 byte order). The two groups are never merged.
- Body values are their compact JSON text with surrounding quotes stripped,
  so strings appear bare and numbers/booleans/null keep their JSON spelling.
- An array body yields one signee per element, joined with "&" in array order.
- timestamp and window are always appended last, once.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any

import orjson

from bpxclient.errors import InvalidRequestError

QueryParams = Mapping[str, str] | Iterable[tuple[str, str]]


def now_millis() -> int:
    """Current unix time in milliseconds."""
    return time.time_ns() // 1_000_000


def _query_items(query_params: QueryParams | None) -> list[tuple[str, str]]:
    """Unique keys (last value wins), sorted by key."""
    if not query_params:
        return []
    items = query_params.items() if isinstance(query_params, Mapping) else query_params
    unique = {str(k): str(v) for k, v in items}
    return sorted(unique.items())


def dumps_json(value: Any) -> bytes:
    """Compact JSON used for both the request body and signee values."""
    return orjson.dumps(value, default=str)


def flatten_value(value: Any) -> str:
    """String form of a body value as it appears in the signee."""
    return dumps_json(value).decode("utf-8").strip('"')


def build_signee_query(instruction: str, query_params: QueryParams | None = None) -> str:
    """Build ``instruction=<name>`` followed by the sorted query pairs."""
    parts = [f"instruction={instruction}"]
    parts.extend(f"{k}={v}" for k, v in _query_items(query_params))
    return "&".join(parts)


def build_signee_query_and_body(
    instruction: str,
    query_params: QueryParams | None,
    body: Any,
) -> str:
    """
    Build the signee prefix for a request carrying a JSON body.

    Args:
        instruction: Instruction name for the endpoint.
        query_params: Query parameters of the request URL.
        body: JSON-compatible body (dict, or list of dicts for batches).

    Returns:
        Signee without the trailing timestamp/window pair.

    Raises:
        InvalidRequestError: If the body (or an array element) is not an object,
            or an array body is empty.
    """
    if isinstance(body, Mapping):
        signee = build_signee_query(instruction, query_params)
        body_items = sorted((str(k), flatten_value(v)) for k, v in body.items())
        if body_items:
            signee += "&" + "&".join(f"{k}={v}" for k, v in body_items)
        return signee

    if isinstance(body, (list, tuple)):
        if not body:
            raise InvalidRequestError("batch payload must contain at least one object")
        return "&".join(
            build_signee_query_and_body(instruction, query_params, item) for item in body
        )

    raise InvalidRequestError("payload must be a JSON object")


def append_timestamp_window(signee: str, timestamp_ms: int, window_ms: int) -> str:
    return f"{signee}&timestamp={timestamp_ms}&window={window_ms}"


def build_request_signee(
    instruction: str,
    query_params: QueryParams | None,
    body: Any,
    timestamp_ms: int,
    window_ms: int,
) -> str:
    """Full REST signee; a body of None means a parameter-only request."""
    if body is None:
        prefix = build_signee_query(instruction, query_params)
    else:
        prefix = build_signee_query_and_body(instruction, query_params, body)
    return append_timestamp_window(prefix, timestamp_ms, window_ms)


def build_subscribe_signee(timestamp_ms: int, window_ms: int) -> str:
    """Signee for websocket private stream subscriptions."""
    return append_timestamp_window("instruction=subscribe", timestamp_ms, window_ms)
