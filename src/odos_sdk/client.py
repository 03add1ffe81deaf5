"""Main synchronous and asynchronous clients for the Odos API."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

import httpx

from .assemble import AssemblyService, AsyncAssemblyService
from .config import ClientConfig, Endpoint
from .models import AssemblyRequest, Quote, QuoteRequest, Simulation, TransactionRequest
from .quote import AsyncQuoteService, QuoteService
from .request_options import RequestOptions
from .routers import RouterLookup, v3_router_address
from .swap_builder import AsyncSwapBuilder, SwapBuilder
from .transport import AsyncTransport, Transport


class _BaseOdosClient:
    def __init__(self, config: ClientConfig | None, router_lookup: RouterLookup | None) -> None:
        self.config = config or ClientConfig.from_env()
        self.router_lookup = router_lookup or v3_router_address

    @property
    def endpoint(self) -> Endpoint:
        return self.config.endpoint


class OdosClient(_BaseOdosClient):
    """Synchronous client.

    Construct one and share it: the underlying connection pool is safe to use
    from several threads.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        router_lookup: RouterLookup | None = None,
        httpx_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(config, router_lookup)
        self._transport = Transport(self.config, httpx_client=httpx_client, sleep=sleep)
        self._quotes = QuoteService(self._transport, self.endpoint)
        self._assembly = AssemblyService(self._transport, self.endpoint, self.router_lookup)

    def __enter__(self) -> "OdosClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def quote(self, request: QuoteRequest, *, options: RequestOptions | None = None) -> Quote:
        return self._quotes.quote(request, options=options)

    def assemble(self, request: AssemblyRequest, *, options: RequestOptions | None = None) -> TransactionRequest:
        return self._assembly.assemble(request, options=options)

    def assemble_with_simulation(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> tuple[TransactionRequest, Simulation | None]:
        return self._assembly.assemble_with_simulation(request, options=options)

    def swap(self, *, options: RequestOptions | None = None) -> SwapBuilder:
        return SwapBuilder(self._quotes, self._assembly, self.router_lookup, options=options)


class AsyncOdosClient(_BaseOdosClient):
    """Asynchronous client; share one instance across tasks."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        router_lookup: RouterLookup | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(config, router_lookup)
        self._transport = AsyncTransport(self.config, httpx_client=httpx_client, sleep=sleep)
        self._quotes = AsyncQuoteService(self._transport, self.endpoint)
        self._assembly = AsyncAssemblyService(self._transport, self.endpoint, self.router_lookup)

    async def __aenter__(self) -> "AsyncOdosClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def quote(self, request: QuoteRequest, *, options: RequestOptions | None = None) -> Quote:
        return await self._quotes.quote(request, options=options)

    async def assemble(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> TransactionRequest:
        return await self._assembly.assemble(request, options=options)

    async def assemble_with_simulation(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> tuple[TransactionRequest, Simulation | None]:
        return await self._assembly.assemble_with_simulation(request, options=options)

    def swap(self, *, options: RequestOptions | None = None) -> AsyncSwapBuilder:
        return AsyncSwapBuilder(self._quotes, self._assembly, self.router_lookup, options=options)
