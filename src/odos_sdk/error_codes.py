"""Numeric error codes returned by the Odos API.

Codes are banded by their thousands digit:

- 1xxx: general API errors
- 2xxx: routing / quote algorithm errors
- 3xxx: internal service errors (config, assembly, chain data, pricing, gas)
- 4xxx: request validation errors
- 5xxx: system internal errors
"""

from __future__ import annotations

from enum import Enum, IntEnum


class ErrorCategory(str, Enum):
    GENERAL = "general"
    ALGO = "algo"
    INTERNAL_SERVICE = "internal_service"
    VALIDATION = "validation"
    INTERNAL = "internal"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, code: int) -> "ErrorCategory":
        """Return the band a raw numeric code falls into."""
        band = code // 1000
        return _BANDS.get(band, cls.UNKNOWN) if 1000 <= code <= 5999 else cls.UNKNOWN


_BANDS = {
    1: ErrorCategory.GENERAL,
    2: ErrorCategory.ALGO,
    3: ErrorCategory.INTERNAL_SERVICE,
    4: ErrorCategory.VALIDATION,
    5: ErrorCategory.INTERNAL,
}


class OdosErrorCode(IntEnum):
    API_ERROR = 1000

    NO_VIABLE_PATH = 2000
    ALGO_VALIDATION_ERR = 2400
    ALGO_CONN_ERR = 2997
    ALGO_TIMEOUT = 2998
    ALGO_INTERNAL = 2999

    INTERNAL_SERVICE_ERROR = 3000
    CONFIG_INTERNAL = 3100
    CONFIG_CONN_ERR = 3101
    CONFIG_TIMEOUT = 3102
    TXN_ASSEMBLY_INTERNAL = 3110
    TXN_ASSEMBLY_CONN_ERR = 3111
    TXN_ASSEMBLY_TIMEOUT = 3112
    CHAIN_DATA_INTERNAL = 3120
    CHAIN_DATA_CONN_ERR = 3121
    CHAIN_DATA_TIMEOUT = 3122
    PRICING_INTERNAL = 3130
    PRICING_CONN_ERR = 3131
    PRICING_TIMEOUT = 3132
    GAS_INTERNAL = 3140
    GAS_CONN_ERR = 3141
    GAS_TIMEOUT = 3142
    GAS_UNAVAILABLE = 3143

    INVALID_REQUEST = 4000
    INVALID_CHAIN_ID = 4001
    INVALID_INPUT_TOKENS = 4002
    INVALID_OUTPUT_TOKENS = 4003
    INVALID_USER_ADDR = 4004
    BLOCKED_USER_ADDR = 4005
    TOO_SLIPPERY = 4006
    SAME_INPUT_OUTPUT = 4007
    MULTI_ZAP_OUTPUT = 4008
    INVALID_TOKEN_COUNT = 4009
    INVALID_TOKEN_ADDR = 4010
    NON_INTEGER_TOKEN_AMOUNT = 4011
    NEGATIVE_TOKEN_AMOUNT = 4012
    SAME_INPUT_OUTPUT_TOKENS = 4013
    TOKEN_BLACKLISTED = 4014
    INVALID_TOKEN_PROPORTIONS = 4015
    TOKEN_ROUTING_UNAVAILABLE = 4016
    INVALID_REFERRAL_CODE = 4017
    INVALID_TOKEN_AMOUNT = 4018
    NON_STRING_TOKEN_AMOUNT = 4019
    INVALID_ASSEMBLY_REQUEST = 4100
    INVALID_ASSEMBLY_USER_ADDR = 4101
    INVALID_RECEIVER_ADDR = 4102
    INVALID_SWAP_REQUEST = 4200
    USER_ADDR_REQ = 4201

    INTERNAL_ERROR = 5000
    SWAP_UNAVAILABLE = 5001
    PRICE_CHECK_FAILURE = 5002
    DEFAULT_GAS_FAILURE = 5003

    @classmethod
    def from_code(cls, code: int | None) -> "OdosErrorCode | None":
        """Look up a documented code, returning None for unknown values."""
        if code is None:
            return None
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.of(int(self))

    @property
    def is_timeout(self) -> bool:
        return self in _TIMEOUT_CODES

    @property
    def is_connection_error(self) -> bool:
        return self in _CONNECTION_CODES

    @property
    def is_retryable(self) -> bool:
        """Whether the service reports a transient condition worth retrying."""
        return self.is_timeout or self.is_connection_error or self in _TRANSIENT_INTERNAL_CODES

    @property
    def is_unroutable_token(self) -> bool:
        """The token cannot be routed; an expected answer rather than a fault."""
        return self in _UNROUTABLE_CODES

    @property
    def is_no_viable_path(self) -> bool:
        return self is OdosErrorCode.NO_VIABLE_PATH

    @property
    def is_invalid_chain_id(self) -> bool:
        return self is OdosErrorCode.INVALID_CHAIN_ID

    @property
    def is_blocked_user(self) -> bool:
        return self is OdosErrorCode.BLOCKED_USER_ADDR

    def __str__(self) -> str:
        return f"{int(self)} ({self.name})"


_TIMEOUT_CODES = frozenset(
    {
        OdosErrorCode.ALGO_TIMEOUT,
        OdosErrorCode.CONFIG_TIMEOUT,
        OdosErrorCode.TXN_ASSEMBLY_TIMEOUT,
        OdosErrorCode.CHAIN_DATA_TIMEOUT,
        OdosErrorCode.PRICING_TIMEOUT,
        OdosErrorCode.GAS_TIMEOUT,
    }
)

_CONNECTION_CODES = frozenset(
    {
        OdosErrorCode.ALGO_CONN_ERR,
        OdosErrorCode.CONFIG_CONN_ERR,
        OdosErrorCode.TXN_ASSEMBLY_CONN_ERR,
        OdosErrorCode.CHAIN_DATA_CONN_ERR,
        OdosErrorCode.PRICING_CONN_ERR,
        OdosErrorCode.GAS_CONN_ERR,
    }
)

_TRANSIENT_INTERNAL_CODES = frozenset(
    {
        OdosErrorCode.ALGO_INTERNAL,
        OdosErrorCode.CONFIG_INTERNAL,
        OdosErrorCode.TXN_ASSEMBLY_INTERNAL,
        OdosErrorCode.CHAIN_DATA_INTERNAL,
        OdosErrorCode.PRICING_INTERNAL,
        OdosErrorCode.GAS_INTERNAL,
        OdosErrorCode.GAS_UNAVAILABLE,
        OdosErrorCode.INTERNAL_SERVICE_ERROR,
        OdosErrorCode.INTERNAL_ERROR,
    }
)

_UNROUTABLE_CODES = frozenset(
    {
        OdosErrorCode.TOKEN_ROUTING_UNAVAILABLE,
        OdosErrorCode.TOKEN_BLACKLISTED,
        OdosErrorCode.INVALID_INPUT_TOKENS,
        OdosErrorCode.INVALID_OUTPUT_TOKENS,
        OdosErrorCode.NO_VIABLE_PATH,
    }
)


def describe_code(code: int) -> str:
    """Human-readable label for any numeric code, known or not."""
    known = OdosErrorCode.from_code(code)
    return str(known) if known is not None else f"{code} (UNKNOWN)"
