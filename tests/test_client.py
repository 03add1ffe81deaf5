from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from odos_sdk.client import AsyncOdosClient, OdosClient
from odos_sdk.config import ClientConfig, Endpoint
from odos_sdk.exceptions import (
    OdosClientError,
    OdosMalformedResponseError,
    OdosUnsupportedChainError,
)
from odos_sdk.models import AssemblyRequest, QuoteRequest
from odos_sdk.retry import RetryConfig
from odos_sdk.routers import ODOS_V3_ROUTER

TOKEN_A = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
TOKEN_B = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
USER = "0x47E2D28169738039755586743E2dfCF3bd643f86"


def _client(handler, *, config: ClientConfig | None = None, **kwargs) -> OdosClient:
    config = config or ClientConfig()
    httpx_client = httpx.Client(base_url=config.base_url, transport=httpx.MockTransport(handler))
    return OdosClient(config, httpx_client=httpx_client, sleep=lambda delay: None, **kwargs)


def _quote_request() -> QuoteRequest:
    return (
        QuoteRequest.builder()
        .chain_id(1)
        .input_tokens([(TOKEN_A, 1_000_000)])
        .output_tokens([(TOKEN_B, 1)])
        .slippage_limit_percent(0.5)
        .user_addr(USER)
        .build()
    )


def _assembly_request(**overrides) -> AssemblyRequest:
    builder = (
        AssemblyRequest.builder()
        .chain(1)
        .signer_address(USER)
        .output_recipient(USER)
        .token_address(TOKEN_A)
        .token_amount(1_000_000)
        .path_id("abc123")
    )
    for name, value in overrides.items():
        getattr(builder, name)(value)
    return builder.build()


def test_quote_posts_once_and_returns_path_id() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"pathId": "abc123", "outAmounts": ["2000000"]}, request=request)

    with _client(handler) as client:
        quote = client.quote(_quote_request())

    assert len(calls) == 1
    assert calls[0].url.path == "/sor/quote/v2"
    assert json.loads(calls[0].content)["chainId"] == 1
    assert quote.path_id == "abc123"
    assert quote.out_amount == 2_000_000


def test_quote_uses_configured_api_version() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"pathId": "p", "outAmounts": ["1"]}, request=request)

    config = ClientConfig(endpoint=Endpoint.enterprise())
    with _client(handler, config=config) as client:
        client.quote(_quote_request())

    assert paths == ["/sor/quote/v3"]


@pytest.mark.parametrize("body", [{"outAmounts": ["1"]}, {"pathId": "abc123"}])
def test_quote_missing_fields_is_malformed(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body, request=request)

    with _client(handler) as client, pytest.raises(OdosMalformedResponseError):
        client.quote(_quote_request())


def test_assemble_reused_path_id_surfaces_client_error() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            400,
            json={"detail": "Path ID already used", "errorCode": 4001, "traceId": "abc-trace"},
            request=request,
        )

    with _client(handler) as client, pytest.raises(OdosClientError) as excinfo:
        client.assemble(_assembly_request())

    assert len(calls) == 1
    assert excinfo.value.error_code == 4001
    assert excinfo.value.trace_id == "abc-trace"
    assert not excinfo.value.is_retryable()


def test_assemble_posts_payload_and_fills_defaults() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"transaction": {"data": "0xabcdef", "value": "0", "gas": 210000, "chainId": 1}},
            request=request,
        )

    with _client(handler) as client:
        tx = client.assemble(_assembly_request())

    assert captured["path"] == "/sor/assemble"
    assert captured["body"] == {
        "chainId": 1,
        "pathId": "abc123",
        "userAddr": USER,
        "receiver": USER,
        "simulate": False,
    }
    assert tx.to == ODOS_V3_ROUTER
    assert tx.from_ == USER
    assert tx.data == "0xabcdef"
    assert tx.gas == 210000


def test_assemble_binds_transaction_to_explicit_router() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"to": "0xServerRouter", "data": "0x01", "value": "0x10"}, request=request)

    with _client(handler) as client:
        tx = client.assemble(_assembly_request(router_address="0xMine"))

    assert tx.to == "0xMine"
    assert tx.value == 16


def test_assemble_binds_transaction_to_looked_up_router() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"transaction": {"to": "0xServerRouter", "data": "0x01"}}, request=request)

    with _client(handler, router_lookup=lambda chain_id: "0xLookedUp") as client:
        tx = client.assemble(_assembly_request())

    assert tx.to == "0xLookedUp"


def test_assemble_without_data_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"transaction": {"to": "0xRouter"}}, request=request)

    with _client(handler) as client, pytest.raises(OdosMalformedResponseError):
        client.assemble(_assembly_request())


def test_assemble_with_simulation() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["simulate"] is True
        return httpx.Response(
            200,
            json={
                "transaction": {"to": "0xRouter", "data": "0x01"},
                "simulation": {"isSuccess": True, "amountsOut": [1999000], "gasEstimate": 150000},
            },
            request=request,
        )

    with _client(handler) as client:
        tx, simulation = client.assemble_with_simulation(_assembly_request(simulate=True))

    assert tx.data == "0x01"
    assert simulation is not None
    assert simulation.is_success
    assert simulation.amounts_out == ["1999000"]


def test_router_lookup_failure_happens_before_any_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={}, request=request)

    def lookup(chain_id: int) -> str:
        raise OdosUnsupportedChainError(f"no router on {chain_id}", chain_id=chain_id)

    with _client(handler, router_lookup=lookup) as client, pytest.raises(OdosUnsupportedChainError):
        client.assemble(_assembly_request())

    assert calls == []


def test_client_falls_back_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("ODOS_API_KEY", "1b4e28ba-2fa1-11d2-883f-0016d3cca427")
    monkeypatch.setenv("ODOS_API_VERSION", "v3")
    monkeypatch.delenv("ODOS_API_BASE_URL", raising=False)

    with OdosClient() as client:
        assert client.endpoint.quote_path == "/sor/quote/v3"
        assert client.config.api_key is not None


def test_async_client_quote_and_assemble() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path.startswith("/sor/quote"):
            return httpx.Response(200, json={"pathId": "abc123", "outAmounts": ["2000000"]}, request=request)
        return httpx.Response(200, json={"transaction": {"data": "0xfeed"}}, request=request)

    async def run():
        httpx_client = httpx.AsyncClient(base_url="https://api.odos.xyz", transport=httpx.MockTransport(handler))
        async with AsyncOdosClient(ClientConfig(retry=RetryConfig.no_retries()), httpx_client=httpx_client) as client:
            quote = await client.quote(_quote_request())
            tx = await client.assemble(_assembly_request(path_id=quote.path_id))
        await httpx_client.aclose()
        return quote, tx

    quote, tx = asyncio.run(run())
    assert quote.path_id == "abc123"
    assert tx.data == "0xfeed"
    assert tx.to == ODOS_V3_ROUTER
    assert paths == ["/sor/quote/v2", "/sor/assemble"]
