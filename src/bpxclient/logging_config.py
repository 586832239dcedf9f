"""
Logging setup with redaction of key material.

A RedactingFilter on the handler rewrites each record before formatting:

- structured fields whose key names a credential (secret, api_key,
  signature, X-API-Key, ...) are removed
- signees, bodies, headers, params and payloads become placeholders
- a ``url`` field is replaced by ``endpoint`` holding only the path
- free text has URL query strings cut and inline credentials masked

Library modules only call ``logging.getLogger(__name__)`` and pass context
through ``extra={...}``. Entry points call setup_logging() once.
"""

from __future__ import annotations

import logging
import re
import sys
import time
from collections.abc import Mapping
from typing import IO, Any
from urllib.parse import urlsplit

import orjson

BLOCKED_FIELDS = frozenset(
    {
        "secret",
        "api_key",
        "x-api-key",
        "x-signature",
        "signature",
        "private_key",
        "password",
        "token",
        "authorization",
        "email",
    }
)

PLACEHOLDERS: Mapping[str, str] = {
    "signee": "[SIGNEE]",
    "body": "[BODY]",
    "payload": "[PAYLOAD]",
    "headers": "[HEADERS]",
    "params": "[PARAMS]",
}

_URL = re.compile(r"(?:https?|wss?)://[^\s\"'<>]+")
_INLINE_SECRETS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bx-(?:api-key|signature)\s*[=:]\s*['\"]?[\w+/=-]+['\"]?", re.I), "[HEADER]"),
    (re.compile(r"\b(?:api[_-]?key|secret)\s*[=:]\s*['\"]?[\w+/=-]+['\"]?", re.I), "[SECRET]"),
    (re.compile(r"\bsignature\s*[=:]\s*['\"]?[\w+/=-]+['\"]?", re.I), "[SIGNATURE]"),
    (re.compile(r"\b(?:bearer|token)[=:\s]+['\"]?[\w.-]+['\"]?", re.I), "[TOKEN]"),
    (re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+"), "[EMAIL]"),
)

_REDACTED_MSG = "redacted_msg"
_REDACTED_FIELDS = "redacted_fields"

# Attributes every LogRecord has; anything else came from extra={...}
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
    _REDACTED_MSG,
    _REDACTED_FIELDS,
}

_NOISY_LOGGERS = ("aiohttp", "asyncio")


def endpoint_path(url: str) -> str:
    """Path component of a URL; query, host and credentials are dropped."""
    return urlsplit(url).path or "/"


def _url_to_path(match: re.Match[str]) -> str:
    path = endpoint_path(match.group(0))
    return "[URL]" if path == "/" else path


class Redactor:
    """Rules turning log text and structured fields into output safe to ship."""

    def __init__(
        self,
        *,
        blocked: frozenset[str] = BLOCKED_FIELDS,
        placeholders: Mapping[str, str] = PLACEHOLDERS,
        max_depth: int = 3,
        max_items: int = 10,
    ) -> None:
        self._blocked = blocked
        self._placeholders = placeholders
        self._max_depth = max_depth
        self._max_items = max_items

    def is_blocked(self, key: str) -> bool:
        lowered = key.lower()
        return any(word in lowered for word in self._blocked)

    def text(self, value: str) -> str:
        if not value:
            return value
        value = _URL.sub(_url_to_path, value)
        for pattern, mask in _INLINE_SECRETS:
            value = pattern.sub(mask, value)
        return value

    def fields(self, fields: Mapping[str, Any], _depth: int = 0) -> dict[str, Any]:
        """Copy of fields with blocked keys removed and the rest made safe."""
        if _depth > self._max_depth:
            return {"_truncated": "max depth exceeded"}

        safe: dict[str, Any] = {}
        for key, value in fields.items():
            key = str(key)
            if self.is_blocked(key):
                continue
            lowered = key.lower()
            if lowered == "url" and isinstance(value, str):
                safe["endpoint"] = endpoint_path(value)
            elif lowered in self._placeholders:
                safe[key] = self._placeholders[lowered]
            else:
                safe[key] = self._value(value, _depth)
        return safe

    def _value(self, value: Any, depth: int) -> Any:
        if value is None or isinstance(value, (bool, int, float)):
            return value
        if isinstance(value, str):
            return self.text(value)
        if isinstance(value, Mapping):
            return self.fields(value, depth + 1)
        if isinstance(value, (list, tuple, set, frozenset)):
            if len(value) > self._max_items:
                return f"[list:{len(value)} items]"
            return [self._value(item, depth + 1) for item in value]
        return self.text(str(value))


DEFAULT_REDACTOR = Redactor()


def _extra(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


def _redacted(record: logging.LogRecord, redactor: Redactor) -> tuple[str, dict[str, Any]]:
    """Message and fields prepared by RedactingFilter, or computed here."""
    msg = getattr(record, _REDACTED_MSG, None)
    if msg is not None:
        return msg, getattr(record, _REDACTED_FIELDS, {})
    return redactor.text(record.getMessage()), redactor.fields(_extra(record))


class RedactingFilter(logging.Filter):
    """Attaches the redacted message and fields to every record. Drops nothing."""

    def __init__(self, redactor: Redactor | None = None) -> None:
        super().__init__()
        self.redactor = redactor or DEFAULT_REDACTOR

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, _REDACTED_MSG, self.redactor.text(record.getMessage()))
        setattr(record, _REDACTED_FIELDS, self.redactor.fields(_extra(record)))
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, timestamps in UTC:

        {"ts": "2024-01-01T00:00:00.000Z", "level": "INFO", "logger": "...", "msg": "...", ...}

    WARNING and above also carry file and line. Extra fields never replace the
    base keys.
    """

    converter = time.gmtime

    def __init__(self, redactor: Redactor | None = None) -> None:
        super().__init__()
        self.redactor = redactor or DEFAULT_REDACTOR

    def format(self, record: logging.LogRecord) -> str:
        msg, fields = _redacted(record, self.redactor)
        doc: dict[str, Any] = {
            "ts": f"{self.formatTime(record, '%Y-%m-%dT%H:%M:%S')}.{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": msg,
        }
        if record.levelno >= logging.WARNING:
            doc["file"] = record.filename
            doc["line"] = record.lineno
        if record.exc_info:
            doc["exc"] = self.redactor.text(self.formatException(record.exc_info))

        for key, value in fields.items():
            doc.setdefault(key, value)
        return orjson.dumps(doc, default=str, option=orjson.OPT_NON_STR_KEYS).decode("utf-8")


class SimpleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL    logger: message | key=value ...`` for terminals."""

    def __init__(self, redactor: Redactor | None = None) -> None:
        super().__init__(datefmt="%H:%M:%S")
        self.redactor = redactor or DEFAULT_REDACTOR

    def format(self, record: logging.LogRecord) -> str:
        msg, fields = _redacted(record, self.redactor)
        line = f"{self.formatTime(record, self.datefmt)} {record.levelname:<8} {record.name}: {msg}"
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.redactor.text(self.formatException(record.exc_info))
        return line


def setup_logging(
    *,
    level: int | str = logging.INFO,
    json_format: bool = True,
    stream: IO[str] | None = None,
    redactor: Redactor | None = None,
) -> logging.Handler:
    """
    Replace the root handlers with one redacting stream handler.

    Args:
        level: Root log level.
        json_format: JsonFormatter if True, SimpleFormatter otherwise.
        stream: Destination (default stderr).
        redactor: Custom redaction rules.

    Returns:
        The installed handler.
    """
    redactor = redactor or DEFAULT_REDACTOR
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.addFilter(RedactingFilter(redactor))
    handler.setFormatter(JsonFormatter(redactor) if json_format else SimpleFormatter(redactor))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
