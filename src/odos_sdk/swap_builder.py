"""Fluent swap builder that sequences the quote and assembly phases."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .assemble import AssemblyService, AsyncAssemblyService
from .chains import Chain
from .exceptions import OdosValidationError
from .models import AssemblyRequest, Quote, QuoteRequest, TransactionRequest
from .quote import AsyncQuoteService, QuoteService
from .request_options import RequestOptions
from .routers import RouterLookup
from .values import ReferralCode, Slippage

logger = logging.getLogger(__name__)

_B = TypeVar("_B", bound="_BaseSwapBuilder")


class _BaseSwapBuilder:
    """Collects swap parameters in any order and validates them before I/O.

    Nothing is cached: every terminal call requests a fresh quote, since a
    ``path_id`` can be assembled only once.
    """

    def __init__(self, router_lookup: RouterLookup) -> None:
        self._router_lookup = router_lookup
        self._chain: Any = None
        self._input_token: str | None = None
        self._input_amount: Any = None
        self._output_token: str | None = None
        self._slippage: Any = None
        self._signer: str | None = None
        self._recipient: str | None = None
        self._referral: Any = None
        self._compact = False
        self._simple = False
        self._disable_rfqs = False

    def chain(self: _B, chain: Chain | int | str) -> _B:
        self._chain = chain
        return self

    def from_token(self: _B, token_address: str, amount: int) -> _B:
        self._input_token = token_address
        self._input_amount = amount
        return self

    def input(self: _B, token_address: str, amount: int) -> _B:
        return self.from_token(token_address, amount)

    def to_token(self: _B, token_address: str) -> _B:
        self._output_token = token_address
        return self

    def output(self: _B, token_address: str) -> _B:
        return self.to_token(token_address)

    def slippage(self: _B, slippage: Slippage | float) -> _B:
        self._slippage = slippage
        return self

    def signer(self: _B, address: str) -> _B:
        self._signer = address
        return self

    def recipient(self: _B, address: str) -> _B:
        self._recipient = address
        return self

    def referral(self: _B, code: ReferralCode | int | None) -> _B:
        self._referral = code
        return self

    def compact(self: _B, compact: bool = True) -> _B:
        self._compact = compact
        return self

    def simple(self: _B, simple: bool = True) -> _B:
        self._simple = simple
        return self

    def disable_rfqs(self: _B, disable: bool = True) -> _B:
        self._disable_rfqs = disable
        return self

    def _missing_fields(self) -> list[str]:
        required = {
            "chain": self._chain,
            "from_token": self._input_token,
            "amount": self._input_amount,
            "to_token": self._output_token,
            "slippage": self._slippage,
            "signer": self._signer,
        }
        return [name for name, value in required.items() if value is None]

    def _validated_chain(self) -> Chain:
        missing = self._missing_fields()
        if missing:
            raise OdosValidationError(f"Swap is missing required fields: {', '.join(missing)}")
        return Chain.coerce(self._chain)

    def _router(self, chain: Chain) -> str:
        router = self._router_lookup(chain.id)
        if not router:
            raise OdosValidationError(f"No router address for chain {chain.id}")
        return router

    def _quote_request(self, chain: Chain) -> QuoteRequest:
        slippage = Slippage.coerce(self._slippage)
        referral = ReferralCode.coerce(self._referral)
        return (
            QuoteRequest.builder()
            .chain_id(chain.id)
            .input_tokens([(self._input_token, self._input_amount)])
            .output_tokens([(self._output_token, 1)])
            .slippage_limit_percent(slippage.as_percent)
            .user_addr(self._signer)
            .compact(self._compact)
            .simple(self._simple)
            .disable_rfqs(self._disable_rfqs)
            .referral_code(int(referral))
            .build()
        )

    def _prepare(self, *, with_router: bool) -> tuple[QuoteRequest, str | None]:
        chain = self._validated_chain()
        router = self._router(chain) if with_router else None
        return self._quote_request(chain), router

    def _assembly_request(self, quote: Quote, router: str) -> AssemblyRequest:
        return (
            AssemblyRequest.builder()
            .chain(self._chain)
            .router_address(router)
            .signer_address(self._signer)
            .output_recipient(self._recipient or self._signer)
            .token_address(self._input_token)
            .token_amount(int(self._input_amount))
            .path_id(quote.path_id)
            .build()
        )

    def _log_built(self, transaction: TransactionRequest, quote: Quote) -> None:
        logger.info(
            f"Built swap transaction to {transaction.to} on chain {Chain.coerce(self._chain).id} "
            f"(path_id={quote.path_id})"
        )


class SwapBuilder(_BaseSwapBuilder):
    def __init__(
        self,
        quotes: QuoteService,
        assembly: AssemblyService,
        router_lookup: RouterLookup,
        *,
        options: RequestOptions | None = None,
    ) -> None:
        super().__init__(router_lookup)
        self._quotes = quotes
        self._assembly = assembly
        self._options = options

    def quote(self) -> Quote:
        request, _ = self._prepare(with_router=False)
        return self._quotes.quote(request, options=self._options)

    def build_transaction(self) -> TransactionRequest:
        request, router = self._prepare(with_router=True)
        quote = self._quotes.quote(request, options=self._options)
        transaction = self._assembly.assemble(self._assembly_request(quote, router), options=self._options)
        self._log_built(transaction, quote)
        return transaction


class AsyncSwapBuilder(_BaseSwapBuilder):
    def __init__(
        self,
        quotes: AsyncQuoteService,
        assembly: AsyncAssemblyService,
        router_lookup: RouterLookup,
        *,
        options: RequestOptions | None = None,
    ) -> None:
        super().__init__(router_lookup)
        self._quotes = quotes
        self._assembly = assembly
        self._options = options

    async def quote(self) -> Quote:
        request, _ = self._prepare(with_router=False)
        return await self._quotes.quote(request, options=self._options)

    async def build_transaction(self) -> TransactionRequest:
        request, router = self._prepare(with_router=True)
        quote = await self._quotes.quote(request, options=self._options)
        transaction = await self._assembly.assemble(self._assembly_request(quote, router), options=self._options)
        self._log_built(transaction, quote)
        return transaction
