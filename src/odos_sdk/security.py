"""Security helpers: API keys, header redaction, URL validation, Retry-After."""

from __future__ import annotations

import datetime as _dt
import math
import uuid
from email.utils import parsedate_to_datetime
from typing import Mapping
from urllib.parse import urlparse

from .exceptions import OdosValidationError

API_KEY_HEADER = "x-api-key"

SENSITIVE_HEADERS = {
    "authorization",
    API_KEY_HEADER,
}


class ApiKey:
    """A UUID-formatted Odos API key that never prints its value."""

    __slots__ = ("_value",)

    def __init__(self, value: str | uuid.UUID) -> None:
        if isinstance(value, uuid.UUID):
            self._value = value
            return
        try:
            self._value = uuid.UUID(str(value).strip())
        except ValueError as exc:
            raise OdosValidationError(f"Invalid API key format (expected UUID): {exc}", cause=exc) from exc

    def reveal(self) -> str:
        """Return the raw key. Avoid logging the result."""
        return str(self._value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ApiKey) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return "ApiKey([REDACTED])"

    def __str__(self) -> str:
        return "[REDACTED]"


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def validate_base_url(url: str, *, allow_http: bool = False) -> None:
    """Validate base URL to avoid scheme abuse and plaintext API keys."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise OdosValidationError("base_url must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise OdosValidationError(f"Unsupported base_url scheme: {parsed.scheme}")
    if parsed.scheme == "http" and not allow_http:
        allowed = {"localhost", "127.0.0.1", "::1"}
        host = (parsed.hostname or "").lower()
        if host not in allowed:
            raise OdosValidationError("Non-HTTPS base_url is not allowed without allow_http=True")
    if "\x00" in url:
        raise OdosValidationError("Invalid base_url")


def parse_retry_after(raw: str | None) -> float | None:
    """Parse Retry-After header values into seconds."""
    if raw is None:
        return None

    raw = raw.strip()
    if not raw:
        return None

    try:
        seconds = float(raw)
    except ValueError:
        pass
    else:
        return max(0.0, seconds) if math.isfinite(seconds) else None

    try:
        parsed = parsedate_to_datetime(raw)
    except (ValueError, TypeError, OverflowError):
        return None

    if parsed is None:
        return None

    now = _dt.datetime.now(_dt.timezone.utc)
    if parsed.utcoffset() is None:
        parsed_utc = parsed.replace(tzinfo=_dt.timezone.utc)
    else:
        parsed_utc = parsed.astimezone(_dt.timezone.utc)

    delta = (parsed_utc - now).total_seconds()
    return max(0.0, float(delta))
