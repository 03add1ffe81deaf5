"""Assembly phase: turn a quote's ``path_id`` into an unsigned transaction."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .config import Endpoint
from .exceptions import OdosMalformedResponseError
from .models import AssemblyRequest, Simulation, TransactionRequest
from .request_options import RequestOptions
from .routers import RouterLookup, v3_router_address
from .transport import AsyncTransport, Transport

logger = logging.getLogger(__name__)


def resolve_router(request: AssemblyRequest, router_lookup: RouterLookup) -> str:
    """Router the transaction targets: the request's own, else the lookup's."""
    if request.router_address:
        return request.router_address
    return router_lookup(request.chain.id)


def parse_transaction(body: Mapping[str, Any], *, router: str, signer: str) -> TransactionRequest:
    """Decode the transaction from a flat body or a ``transaction`` object.

    The transaction always targets ``router``, the address resolved before
    the request was sent.
    """
    raw = body.get("transaction")
    if not isinstance(raw, Mapping):
        raw = body
    fields = dict(raw)
    if not fields.get("data"):
        raise OdosMalformedResponseError("Assembly response has no transaction data", body=dict(body))
    if fields.get("to") and str(fields["to"]).lower() != router.lower():
        logger.debug(f"Assembly response targets {fields['to']}, binding to router {router}")
    fields["to"] = router
    if not fields.get("from"):
        fields["from"] = signer
    try:
        return TransactionRequest.model_validate(fields)
    except ValidationError as exc:
        raise OdosMalformedResponseError(
            f"Invalid assembly response: {exc}", body=dict(body), cause=exc
        ) from exc


def parse_simulation(body: Mapping[str, Any]) -> Simulation | None:
    raw = body.get("simulation")
    if not isinstance(raw, Mapping):
        return None
    try:
        return Simulation.model_validate(raw)
    except ValidationError as exc:
        raise OdosMalformedResponseError(
            f"Invalid simulation in assembly response: {exc}", body=dict(body), cause=exc
        ) from exc


class _BaseAssemblyService:
    def __init__(self, endpoint: Endpoint, router_lookup: RouterLookup | None = None) -> None:
        self._endpoint = endpoint
        self._router_lookup = router_lookup or v3_router_address

    def _decode(
        self, request: AssemblyRequest, router: str, body: dict[str, Any]
    ) -> tuple[TransactionRequest, Simulation | None]:
        transaction = parse_transaction(body, router=router, signer=request.signer_address)
        simulation = parse_simulation(body)
        logger.debug(f"Assembled path_id={request.path_id} on chain {request.chain.id} -> {transaction.to}")
        return transaction, simulation


class AssemblyService(_BaseAssemblyService):
    def __init__(
        self,
        transport: Transport,
        endpoint: Endpoint,
        router_lookup: RouterLookup | None = None,
    ) -> None:
        super().__init__(endpoint, router_lookup)
        self._transport = transport

    def assemble_with_simulation(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> tuple[TransactionRequest, Simulation | None]:
        router = resolve_router(request, self._router_lookup)
        body = self._transport.post(self._endpoint.assemble_path, request.to_payload(), options=options)
        return self._decode(request, router, body)

    def assemble(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> TransactionRequest:
        transaction, _ = self.assemble_with_simulation(request, options=options)
        return transaction


class AsyncAssemblyService(_BaseAssemblyService):
    def __init__(
        self,
        transport: AsyncTransport,
        endpoint: Endpoint,
        router_lookup: RouterLookup | None = None,
    ) -> None:
        super().__init__(endpoint, router_lookup)
        self._transport = transport

    async def assemble_with_simulation(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> tuple[TransactionRequest, Simulation | None]:
        router = resolve_router(request, self._router_lookup)
        body = await self._transport.post(self._endpoint.assemble_path, request.to_payload(), options=options)
        return self._decode(request, router, body)

    async def assemble(
        self, request: AssemblyRequest, *, options: RequestOptions | None = None
    ) -> TransactionRequest:
        transaction, _ = await self.assemble_with_simulation(request, options=options)
        return transaction
