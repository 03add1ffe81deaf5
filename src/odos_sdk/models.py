"""Typed request and response models for the Odos SOR API."""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .chains import Chain
from .exceptions import OdosValidationError


class OdosModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ErrorResponse(OdosModel):
    error_code: int | None = None
    detail: str | None = None
    message: str | None = None
    trace_id: str | None = None

    @field_validator("error_code", mode="before")
    @classmethod
    def _numeric_code(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return None

    @field_validator("detail", "message", "trace_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def text(self) -> str | None:
        return self.detail or self.message


def _parse_int(value: Any) -> Any:
    """Accept ints, decimal strings and 0x-prefixed hex strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    return value


def _amounts_as_strings(value: Any) -> Any:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [str(item) for item in value]
    return value


class InputToken(OdosModel):
    token_address: str
    amount: str

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_string(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("amount must be an integer")
        if isinstance(value, int):
            if value < 0:
                raise ValueError("amount must be non-negative")
            return str(value)
        return value

    @field_validator("amount")
    @classmethod
    def _amount_is_integer(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError("amount must be a non-negative integer in base units")
        return value


class OutputToken(OdosModel):
    token_address: str
    proportion: float = 1

    @field_validator("proportion")
    @classmethod
    def _proportion_in_range(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("proportion must be in (0, 1]")
        return value


class QuoteRequest(OdosModel):
    """Body of ``POST /sor/quote/<version>``."""

    chain_id: int
    input_tokens: list[InputToken] = Field(min_length=1)
    output_tokens: list[OutputToken] = Field(min_length=1)
    slippage_limit_percent: float = Field(gt=0, le=100)
    user_addr: str
    compact: bool = False
    simple: bool = False
    disable_rfqs: bool = Field(default=False, alias="disableRFQs")
    referral_code: int = Field(default=0, ge=0)

    @classmethod
    def builder(cls) -> "QuoteRequestBuilder":
        return QuoteRequestBuilder()


class Quote(OdosModel):
    """A routed quote. ``path_id`` is single-use and short-lived."""

    path_id: str = Field(min_length=1)
    out_amounts: list[str]
    in_amounts: list[str] = Field(default_factory=list)
    gas_estimate: float | None = None
    price_impact: float | None = None
    block_number: int | None = None
    data_gas_estimate: int | None = None
    gas_estimate_value: float | None = None
    gwei_per_gas: float | None = None
    in_tokens: list[str] | None = None
    out_tokens: list[str] | None = None
    in_values: list[float] | None = None
    out_values: list[float] | None = None
    net_out_value: float | None = None
    partner_fee_percent: float | None = None
    percent_diff: float | None = None
    path_viz: Any | None = None

    @field_validator("in_amounts", mode="before")
    @classmethod
    def _in_amounts(cls, value: Any) -> Any:
        return [] if value is None else _amounts_as_strings(value)

    @field_validator("out_amounts", mode="before")
    @classmethod
    def _out_amounts(cls, value: Any) -> Any:
        return _amounts_as_strings(value)

    @property
    def out_amount(self) -> int | None:
        return int(self.out_amounts[0]) if self.out_amounts else None

    @property
    def in_amount(self) -> int | None:
        return int(self.in_amounts[0]) if self.in_amounts else None


class AssemblyRequest(OdosModel):
    """Everything needed to turn a quote's ``path_id`` into a transaction."""

    chain: Chain
    signer_address: str
    output_recipient: str
    token_address: str
    token_amount: int = Field(ge=0)
    path_id: str = Field(min_length=1)
    router_address: str | None = None
    simulate: bool = False

    @field_validator("chain", mode="before")
    @classmethod
    def _coerce_chain(cls, value: Any) -> Any:
        return Chain.coerce(value)

    @classmethod
    def builder(cls) -> "AssemblyRequestBuilder":
        return AssemblyRequestBuilder()

    def to_payload(self) -> dict[str, Any]:
        return {
            "chainId": self.chain.id,
            "pathId": self.path_id,
            "userAddr": self.signer_address,
            "receiver": self.output_recipient,
            "simulate": self.simulate,
        }


class TransactionRequest(OdosModel):
    """Unsigned transaction returned by assembly, handed to the caller's signer."""

    to: str
    data: str
    value: int = 0
    from_: str | None = Field(default=None, alias="from")
    gas: int | None = None
    gas_price: int | None = None
    chain_id: int | None = None
    nonce: int | None = None

    @field_validator("value", "gas", "gas_price", "chain_id", "nonce", mode="before")
    @classmethod
    def _integers(cls, value: Any) -> Any:
        return _parse_int(value)

    @field_validator("gas")
    @classmethod
    def _drop_unknown_gas(cls, value: int | None) -> int | None:
        # the service reports -1 when it could not estimate gas
        if value is not None and value < 0:
            return None
        return value


class SimulationError(OdosModel):
    type: str | None = None
    error_message: str | None = None


class Simulation(OdosModel):
    is_success: bool
    amounts_out: list[str] = Field(default_factory=list)
    gas_estimate: int | None = None
    simulation_error: SimulationError | None = None

    @field_validator("amounts_out", mode="before")
    @classmethod
    def _amounts_out(cls, value: Any) -> Any:
        return [] if value is None else _amounts_as_strings(value)

    @property
    def error_message(self) -> str | None:
        return self.simulation_error.error_message if self.simulation_error else None


ModelT = TypeVar("ModelT", bound=OdosModel)


class _ModelBuilder(Generic[ModelT]):
    """Collects fields fluently and validates them all at ``build()``."""

    model: ClassVar[type[OdosModel]]
    required: ClassVar[tuple[str, ...]]

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> Any:
        self._values[name] = value
        return self

    def missing_fields(self) -> list[str]:
        return [name for name in self.required if self._values.get(name) is None]

    def _normalized(self) -> dict[str, Any]:
        return dict(self._values)

    def build(self) -> ModelT:
        missing = self.missing_fields()
        if missing:
            raise OdosValidationError(
                f"{self.model.__name__} is missing required fields: {', '.join(missing)}"
            )
        try:
            return self.model(**self._normalized())  # type: ignore[return-value]
        except (ValidationError, TypeError, ValueError) as exc:
            raise OdosValidationError(f"Invalid {self.model.__name__}: {exc}", cause=exc) from exc


class QuoteRequestBuilder(_ModelBuilder[QuoteRequest]):
    model = QuoteRequest
    required = ("chain_id", "input_tokens", "output_tokens", "slippage_limit_percent", "user_addr")

    def _normalized(self) -> dict[str, Any]:
        values = dict(self._values)
        values["chain_id"] = int(values["chain_id"])
        values["input_tokens"] = [_input_token(token) for token in values["input_tokens"]]
        values["output_tokens"] = [_output_token(token) for token in values["output_tokens"]]
        return values

    def chain_id(self, chain_id: Chain | int) -> "QuoteRequestBuilder":
        return self._set("chain_id", chain_id)

    def input_tokens(
        self, tokens: Sequence[InputToken | tuple[str, int | str] | Mapping[str, Any]]
    ) -> "QuoteRequestBuilder":
        return self._set("input_tokens", list(tokens))

    def output_tokens(
        self, tokens: Sequence[OutputToken | tuple[str, float] | Mapping[str, Any]]
    ) -> "QuoteRequestBuilder":
        return self._set("output_tokens", list(tokens))

    def slippage_limit_percent(self, percent: float) -> "QuoteRequestBuilder":
        return self._set("slippage_limit_percent", percent)

    def user_addr(self, address: str) -> "QuoteRequestBuilder":
        return self._set("user_addr", address)

    def compact(self, compact: bool) -> "QuoteRequestBuilder":
        return self._set("compact", compact)

    def simple(self, simple: bool) -> "QuoteRequestBuilder":
        return self._set("simple", simple)

    def disable_rfqs(self, disable: bool) -> "QuoteRequestBuilder":
        return self._set("disable_rfqs", disable)

    def referral_code(self, code: int) -> "QuoteRequestBuilder":
        return self._set("referral_code", int(code))


class AssemblyRequestBuilder(_ModelBuilder[AssemblyRequest]):
    model = AssemblyRequest
    required = (
        "chain",
        "signer_address",
        "output_recipient",
        "token_address",
        "token_amount",
        "path_id",
    )

    def chain(self, chain: Chain | int) -> "AssemblyRequestBuilder":
        return self._set("chain", chain)

    def router_address(self, address: str) -> "AssemblyRequestBuilder":
        return self._set("router_address", address)

    def signer_address(self, address: str) -> "AssemblyRequestBuilder":
        return self._set("signer_address", address)

    def output_recipient(self, address: str) -> "AssemblyRequestBuilder":
        return self._set("output_recipient", address)

    def token_address(self, address: str) -> "AssemblyRequestBuilder":
        return self._set("token_address", address)

    def token_amount(self, amount: int) -> "AssemblyRequestBuilder":
        return self._set("token_amount", amount)

    def path_id(self, path_id: str) -> "AssemblyRequestBuilder":
        return self._set("path_id", path_id)

    def simulate(self, simulate: bool) -> "AssemblyRequestBuilder":
        return self._set("simulate", simulate)


def _input_token(token: InputToken | tuple[str, int | str] | Mapping[str, Any]) -> InputToken:
    if isinstance(token, InputToken):
        return token
    if isinstance(token, Mapping):
        return InputToken.model_validate(token)
    address, amount = token
    return InputToken(token_address=address, amount=amount)


def _output_token(token: OutputToken | tuple[str, float] | Mapping[str, Any]) -> OutputToken:
    if isinstance(token, OutputToken):
        return token
    if isinstance(token, Mapping):
        return OutputToken.model_validate(token)
    address, proportion = token
    return OutputToken(token_address=address, proportion=proportion)
