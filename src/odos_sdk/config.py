"""Client configuration: endpoint selection, timeouts, pooling and retries."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from .exceptions import OdosValidationError
from .retry import RetryConfig
from .security import ApiKey, validate_base_url

API_KEY_ENV_VAR = "ODOS_API_KEY"
BASE_URL_ENV_VAR = "ODOS_API_BASE_URL"
API_VERSION_ENV_VAR = "ODOS_API_VERSION"


class ApiHost(str, Enum):
    PUBLIC = "https://api.odos.xyz"
    ENTERPRISE = "https://enterprise-api.odos.xyz"


class ApiVersion(str, Enum):
    V2 = "v2"
    V3 = "v3"


@dataclass(frozen=True)
class Endpoint:
    """Host plus quote API version."""

    host: str = ApiHost.PUBLIC.value
    version: ApiVersion = ApiVersion.V2

    def __post_init__(self) -> None:
        host = self.host.value if isinstance(self.host, ApiHost) else str(self.host)
        object.__setattr__(self, "host", host.rstrip("/"))
        try:
            version = ApiVersion(self.version)
        except ValueError as exc:
            raise OdosValidationError(f"Unsupported API version: {self.version}", cause=exc) from exc
        object.__setattr__(self, "version", version)

    @classmethod
    def public(cls, version: ApiVersion | str = ApiVersion.V2) -> "Endpoint":
        return cls(ApiHost.PUBLIC.value, version)  # type: ignore[arg-type]

    @classmethod
    def enterprise(cls, version: ApiVersion | str = ApiVersion.V3) -> "Endpoint":
        return cls(ApiHost.ENTERPRISE.value, version)  # type: ignore[arg-type]

    @property
    def quote_path(self) -> str:
        return f"/sor/quote/{self.version.value}"

    @property
    def assemble_path(self) -> str:
        return "/sor/assemble"

    def url(self, path: str) -> str:
        return f"{self.host}{path}"


@dataclass(frozen=True)
class ClientConfig:
    """Everything needed to build a pooled client.

    Timeouts are in seconds. ``max_connections`` bounds the shared pool and
    idle pooled connections are dropped after ``pool_idle_timeout``.
    """

    endpoint: Endpoint = field(default_factory=Endpoint)
    api_key: ApiKey | None = None
    timeout: float = 30.0
    connect_timeout: float = 10.0
    max_connections: int = 20
    pool_idle_timeout: float = 90.0
    retry: RetryConfig = field(default_factory=RetryConfig)
    headers: Mapping[str, str] | None = None
    allow_http: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.api_key, str):
            object.__setattr__(self, "api_key", ApiKey(self.api_key))
        if self.timeout <= 0:
            raise OdosValidationError("timeout must be greater than 0")
        if self.connect_timeout <= 0:
            raise OdosValidationError("connect_timeout must be greater than 0")
        if self.max_connections < 1:
            raise OdosValidationError("max_connections must be at least 1")
        if self.pool_idle_timeout < 0:
            raise OdosValidationError("pool_idle_timeout must be non-negative")
        validate_base_url(self.endpoint.host, allow_http=self.allow_http)

    @property
    def base_url(self) -> str:
        return self.endpoint.host

    @classmethod
    def from_env(cls, **overrides: object) -> "ClientConfig":
        """Build a config from ``ODOS_*`` environment variables.

        Keyword arguments take precedence over the environment.
        """
        kwargs: dict[str, object] = {}
        base_url = os.getenv(BASE_URL_ENV_VAR)
        version = os.getenv(API_VERSION_ENV_VAR)
        if base_url or version:
            kwargs["endpoint"] = Endpoint(
                base_url or ApiHost.PUBLIC.value,
                version or ApiVersion.V2,  # type: ignore[arg-type]
            )
        api_key = os.getenv(API_KEY_ENV_VAR)
        if api_key:
            kwargs["api_key"] = ApiKey(api_key)
        kwargs.update(overrides)
        return cls(**kwargs)  # type: ignore[arg-type]
