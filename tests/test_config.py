from __future__ import annotations

import datetime as dt
from email.utils import format_datetime

import pytest

from odos_sdk.config import ApiHost, ApiVersion, ClientConfig, Endpoint
from odos_sdk.exceptions import OdosValidationError
from odos_sdk.retry import RetryConfig
from odos_sdk.security import ApiKey, parse_retry_after, sanitize_headers, validate_base_url

KEY = "1b4e28ba-2fa1-11d2-883f-0016d3cca427"


def test_endpoint_paths() -> None:
    endpoint = Endpoint()
    assert endpoint.host == ApiHost.PUBLIC.value
    assert endpoint.quote_path == "/sor/quote/v2"
    assert endpoint.assemble_path == "/sor/assemble"
    assert Endpoint.public(ApiVersion.V3).quote_path == "/sor/quote/v3"
    assert Endpoint.enterprise().host == "https://enterprise-api.odos.xyz"
    assert Endpoint("https://proxy.example.com/").url("/sor/assemble") == "https://proxy.example.com/sor/assemble"


def test_endpoint_rejects_unknown_version() -> None:
    with pytest.raises(OdosValidationError):
        Endpoint(version="v9")  # type: ignore[arg-type]


def test_client_config_defaults() -> None:
    config = ClientConfig()
    assert config.timeout == 30.0
    assert config.connect_timeout == 10.0
    assert config.max_connections == 20
    assert config.pool_idle_timeout == 90.0
    assert config.retry == RetryConfig()
    assert config.api_key is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout": 0},
        {"connect_timeout": -1},
        {"max_connections": 0},
        {"pool_idle_timeout": -1},
        {"endpoint": Endpoint("http://api.example.com")},
        {"api_key": "not-a-uuid"},
    ],
)
def test_client_config_validation(kwargs) -> None:
    with pytest.raises(OdosValidationError):
        ClientConfig(**kwargs)


def test_client_config_allows_local_http() -> None:
    assert ClientConfig(endpoint=Endpoint("http://localhost:8080")).base_url == "http://localhost:8080"
    assert ClientConfig(endpoint=Endpoint("http://odos.internal"), allow_http=True).base_url == "http://odos.internal"


def test_client_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ODOS_API_KEY", KEY)
    monkeypatch.setenv("ODOS_API_BASE_URL", "https://enterprise-api.odos.xyz")
    monkeypatch.setenv("ODOS_API_VERSION", "v3")

    config = ClientConfig.from_env(timeout=5.0)

    assert config.api_key == ApiKey(KEY)
    assert config.endpoint == Endpoint.enterprise(ApiVersion.V3)
    assert config.timeout == 5.0


def test_client_config_from_empty_env(monkeypatch) -> None:
    for name in ("ODOS_API_KEY", "ODOS_API_BASE_URL", "ODOS_API_VERSION"):
        monkeypatch.delenv(name, raising=False)
    assert ClientConfig.from_env() == ClientConfig()


def test_api_key_is_redacted() -> None:
    key = ApiKey(KEY)
    assert key.reveal() == KEY
    assert repr(key) == "ApiKey([REDACTED])"
    assert str(key) == "[REDACTED]"
    assert KEY not in repr(ClientConfig(api_key=key))


def test_sanitize_headers() -> None:
    headers = sanitize_headers({"x-api-key": KEY, "Authorization": "Bearer t", "Accept": "application/json"})
    assert headers == {"x-api-key": "[REDACTED]", "Authorization": "[REDACTED]", "Accept": "application/json"}


@pytest.mark.parametrize("url", ["ftp://api.odos.xyz", "api.odos.xyz", "https://api.odos.xyz/\x00"])
def test_validate_base_url_rejects(url: str) -> None:
    with pytest.raises(OdosValidationError):
        validate_base_url(url)


def test_parse_retry_after() -> None:
    assert parse_retry_after("7") == 7.0
    assert parse_retry_after(" 1.5 ") == 1.5
    assert parse_retry_after("-3") == 0.0
    assert parse_retry_after(None) is None
    assert parse_retry_after("soon") is None
    assert parse_retry_after("inf") is None
    assert parse_retry_after("nan") is None

    future = dt.datetime.now(dt.timezone.utc) + dt.timedelta(seconds=30)
    seconds = parse_retry_after(format_datetime(future, usegmt=True))
    assert seconds is not None and 25 <= seconds <= 31
