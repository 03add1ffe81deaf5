"""SDK-specific exceptions."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from .error_codes import ErrorCategory, OdosErrorCode, describe_code

DEFAULT_RETRY_DELAY = 1.0


class ErrorKind(str, Enum):
    NETWORK_FAILURE = "network_failure"
    TIMEOUT = "timeout"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    MALFORMED_RESPONSE = "malformed_response"


class OdosError(Exception):
    """Base exception for all Odos SDK failures."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | None = None,
        trace_id: str | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        retry_after: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.trace_id = trace_id
        self.body = body
        self.headers = dict(headers) if headers is not None else {}
        self.retry_after = retry_after
        self.cause = cause

    def __str__(self) -> str:
        parts = []
        if self.status_code is not None:
            parts.append(str(self.status_code))
        if self.error_code is not None:
            parts.append(describe_code(self.error_code))
        text = " ".join(parts) + f": {self.message}" if parts else self.message
        if self.trace_id:
            text += f" [trace_id={self.trace_id}]"
        return text

    @property
    def code(self) -> OdosErrorCode | None:
        """The documented API error code, if the response carried one."""
        return OdosErrorCode.from_code(self.error_code)

    @property
    def category(self) -> ErrorCategory | None:
        if self.error_code is None:
            return None
        return ErrorCategory.of(self.error_code)

    def is_rate_limit(self) -> bool:
        return self.kind is ErrorKind.RATE_LIMITED

    def is_timeout(self) -> bool:
        if self.kind is ErrorKind.TIMEOUT:
            return True
        code = self.code
        return code is not None and code.is_timeout

    def is_no_viable_path(self) -> bool:
        code = self.code
        return code is not None and code.is_no_viable_path

    def is_validation_error(self) -> bool:
        return self.category is ErrorCategory.VALIDATION

    def is_retryable(self, *, retry_server_errors: bool = True) -> bool:
        """Default retry eligibility.

        Network failures and timeouts are retryable, server errors only when
        ``retry_server_errors`` is set. Client errors, malformed responses and
        rate limits never are: a rate limit has to be coordinated across every
        caller sharing the quota, which a single request cannot do.
        """
        if self.kind in (ErrorKind.NETWORK_FAILURE, ErrorKind.TIMEOUT):
            return True
        if self.kind is ErrorKind.SERVER_ERROR:
            return retry_server_errors
        return False

    def suggested_retry_delay(self) -> float | None:
        """Seconds a caller should wait before trying again, if at all."""
        if self.kind is ErrorKind.RATE_LIMITED:
            return self.retry_after
        if self.is_retryable():
            return DEFAULT_RETRY_DELAY
        return None


class OdosValidationError(OdosError):
    """Raised for invalid local input, before any request is sent."""

    def is_validation_error(self) -> bool:
        return True


class OdosUnsupportedChainError(OdosValidationError):
    """Raised when a chain id is not served by Odos or lacks a router."""

    def __init__(self, message: str, *, chain_id: int | None = None) -> None:
        super().__init__(message)
        self.chain_id = chain_id


class OdosNetworkError(OdosError):
    """Raised for transport-level failures like DNS and TCP errors."""

    kind = ErrorKind.NETWORK_FAILURE


class OdosTimeoutError(OdosError):
    """Raised when a request exceeds the configured timeout."""

    kind = ErrorKind.TIMEOUT


class OdosHTTPError(OdosError):
    """Raised for HTTP non-success responses."""


class OdosClientError(OdosHTTPError):
    """Raised for 4xx responses other than 429."""

    kind = ErrorKind.CLIENT_ERROR


class OdosServerError(OdosHTTPError):
    """Raised for 5xx responses."""

    kind = ErrorKind.SERVER_ERROR


class OdosRateLimitError(OdosHTTPError):
    """Raised for HTTP 429 responses."""

    kind = ErrorKind.RATE_LIMITED


class OdosMalformedResponseError(OdosError):
    """Raised when a response cannot be decoded into the expected shape."""

    kind = ErrorKind.MALFORMED_RESPONSE
