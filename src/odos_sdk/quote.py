"""Quote phase: ``POST /sor/quote/<version>``."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from .config import Endpoint
from .exceptions import OdosMalformedResponseError
from .models import Quote, QuoteRequest
from .request_options import RequestOptions
from .transport import AsyncTransport, Transport

logger = logging.getLogger(__name__)


def parse_quote(body: dict[str, Any]) -> Quote:
    try:
        return Quote.model_validate(body)
    except ValidationError as exc:
        raise OdosMalformedResponseError(f"Invalid quote response: {exc}", body=body, cause=exc) from exc


class QuoteService:
    def __init__(self, transport: Transport, endpoint: Endpoint) -> None:
        self._transport = transport
        self._endpoint = endpoint

    def quote(self, request: QuoteRequest, *, options: RequestOptions | None = None) -> Quote:
        body = self._transport.post(self._endpoint.quote_path, request.to_payload(), options=options)
        quote = parse_quote(body)
        logger.debug(f"Quote on chain {request.chain_id}: path_id={quote.path_id}")
        return quote


class AsyncQuoteService:
    def __init__(self, transport: AsyncTransport, endpoint: Endpoint) -> None:
        self._transport = transport
        self._endpoint = endpoint

    async def quote(self, request: QuoteRequest, *, options: RequestOptions | None = None) -> Quote:
        body = await self._transport.post(self._endpoint.quote_path, request.to_payload(), options=options)
        quote = parse_quote(body)
        logger.debug(f"Quote on chain {request.chain_id}: path_id={quote.path_id}")
        return quote
