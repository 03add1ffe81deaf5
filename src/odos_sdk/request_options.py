"""Per-request overrides for the Odos clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .retry import RetryConfig


@dataclass(frozen=True)
class RequestOptions:
    timeout: float | None = None
    retry: RetryConfig | None = None
    headers: Mapping[str, str] | None = None
