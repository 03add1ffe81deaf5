"""Pooled HTTP transport with retries for the Odos API."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping

import httpx
from pydantic import ValidationError

from .config import ClientConfig
from .exceptions import (
    OdosClientError,
    OdosError,
    OdosMalformedResponseError,
    OdosNetworkError,
    OdosRateLimitError,
    OdosServerError,
    OdosTimeoutError,
    OdosValidationError,
)
from .models import ErrorResponse
from .request_options import RequestOptions
from .retry import RetryConfig, RetryPolicy
from .security import API_KEY_HEADER, parse_retry_after, sanitize_headers

logger = logging.getLogger(__name__)

USER_AGENT = "odos-sdk-python/0.1.0"


def _normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(key): str(value) for key, value in headers.items()}


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_from_response(response: httpx.Response) -> OdosError:
    """Classify a non-2xx response into the matching exception."""
    parsed_body = _decode_json(response)
    raw_body = response.text if parsed_body is None else None

    details = ErrorResponse()
    if isinstance(parsed_body, Mapping):
        try:
            details = ErrorResponse.model_validate(parsed_body)
        except ValidationError:
            pass

    message = details.text or (raw_body.strip() if raw_body else "") or response.reason_phrase or "request failed"
    kwargs: dict[str, Any] = {
        "status_code": response.status_code,
        "error_code": details.error_code,
        "trace_id": details.trace_id,
        "body": parsed_body if parsed_body is not None else raw_body,
        "headers": sanitize_headers(response.headers),
    }
    status = response.status_code
    if status == 429:
        return OdosRateLimitError(
            message, retry_after=parse_retry_after(response.headers.get("Retry-After")), **kwargs
        )
    if 400 <= status < 500:
        return OdosClientError(message, **kwargs)
    if 500 <= status < 600:
        return OdosServerError(message, **kwargs)
    return OdosMalformedResponseError(f"Unexpected HTTP status {status}: {message}", **kwargs)


def _parse_success(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise OdosMalformedResponseError(
            "Response body is not valid JSON",
            status_code=response.status_code,
            body=response.text,
            cause=exc,
        ) from exc
    if not isinstance(body, dict):
        raise OdosMalformedResponseError(
            f"Expected a JSON object, got {type(body).__name__}",
            status_code=response.status_code,
            body=body,
        )
    return body


def _error_from_exception(exc: httpx.RequestError, timeout: float) -> OdosError:
    if isinstance(exc, httpx.TimeoutException):
        return OdosTimeoutError(f"Request timed out after {timeout:g}s", cause=exc)
    if isinstance(exc, httpx.DecodingError):
        return OdosMalformedResponseError(f"Response body could not be decoded: {exc}", cause=exc)
    return OdosNetworkError(f"Network error: {exc}", cause=exc)


class _BaseTransport:
    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self._default_headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if config.api_key is not None:
            self._default_headers[API_KEY_HEADER] = config.api_key.reveal()
        if config.headers:
            self._default_headers.update(_normalize_headers(config.headers))

        self._client_kwargs = {
            "base_url": config.base_url,
            "timeout": httpx.Timeout(config.timeout, connect=config.connect_timeout),
            "limits": httpx.Limits(
                max_connections=config.max_connections,
                keepalive_expiry=config.pool_idle_timeout,
            ),
            "trust_env": False,
        }

    @staticmethod
    def _path(path: str) -> str:
        if "://" in path:
            raise OdosValidationError("Full URLs are not allowed as request paths")
        if not path.startswith("/"):
            raise OdosValidationError("Path must be absolute and start with '/'")
        return path

    def _headers(self, options: RequestOptions) -> dict[str, str]:
        merged = dict(self._default_headers)
        if options.headers:
            merged.update(_normalize_headers(options.headers))
        return merged

    def _timeout(self, options: RequestOptions) -> httpx.Timeout:
        timeout = options.timeout if options.timeout is not None else self.config.timeout
        if timeout <= 0:
            raise OdosValidationError("timeout must be greater than 0")
        return httpx.Timeout(timeout, connect=min(timeout, self.config.connect_timeout))

    def _policy(self, options: RequestOptions) -> RetryPolicy:
        retry: RetryConfig = options.retry or self.config.retry
        return RetryPolicy(retry)

    @staticmethod
    def _handle(response: httpx.Response) -> dict[str, Any]:
        logger.debug(f"{response.request.method} {response.request.url.path} -> {response.status_code}")
        if response.is_success:
            return _parse_success(response)
        raise _error_from_response(response)


class Transport(_BaseTransport):
    """Synchronous transport over a shared ``httpx.Client`` pool."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        httpx_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(config)
        self._owns_client = httpx_client is None
        self._httpx = httpx_client or httpx.Client(**self._client_kwargs)
        self._sleep = sleep

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._httpx.close()

    def post(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        options: RequestOptions | None = None,
    ) -> dict[str, Any]:
        """POST ``payload`` as JSON and return the decoded object body.

        Retries are resolved here; only the final error is raised.
        """
        options = options or RequestOptions()
        path = self._path(path)
        headers = self._headers(options)
        timeout = self._timeout(options)
        policy = self._policy(options)

        attempt = 0
        while True:
            attempt += 1
            logger.debug(f"POST {path} attempt {attempt} headers={sanitize_headers(headers)}")
            try:
                try:
                    response = self._httpx.post(path, json=dict(payload), headers=headers, timeout=timeout)
                except httpx.RequestError as exc:
                    error = _error_from_exception(exc, timeout.read or self.config.timeout)
                    raise error from exc
                return self._handle(response)
            except OdosError as error:
                delay = policy.next_delay(error, attempt)
                if delay is None:
                    raise
                self._sleep(delay)


class AsyncTransport(_BaseTransport):
    """Asynchronous transport over a shared ``httpx.AsyncClient`` pool."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        httpx_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(config)
        self._owns_client = httpx_client is None
        self._httpx = httpx_client or httpx.AsyncClient(**self._client_kwargs)
        self._sleep = sleep

    async def __aenter__(self) -> "AsyncTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._httpx.aclose()

    async def post(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        options: RequestOptions | None = None,
    ) -> dict[str, Any]:
        options = options or RequestOptions()
        path = self._path(path)
        headers = self._headers(options)
        timeout = self._timeout(options)
        policy = self._policy(options)

        attempt = 0
        while True:
            attempt += 1
            logger.debug(f"POST {path} attempt {attempt} headers={sanitize_headers(headers)}")
            try:
                try:
                    response = await self._httpx.post(path, json=dict(payload), headers=headers, timeout=timeout)
                except httpx.RequestError as exc:
                    error = _error_from_exception(exc, timeout.read or self.config.timeout)
                    raise error from exc
                return self._handle(response)
            except OdosError as error:
                delay = policy.next_delay(error, attempt)
                if delay is None:
                    raise
                await self._sleep(delay)
