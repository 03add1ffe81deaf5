"""Python client for the Odos smart order routing API."""

from .chains import SUPPORTED_CHAINS, Chain
from .client import AsyncOdosClient, OdosClient
from .config import ApiHost, ApiVersion, ClientConfig, Endpoint
from .error_codes import ErrorCategory, OdosErrorCode
from .exceptions import (
    DEFAULT_RETRY_DELAY,
    ErrorKind,
    OdosClientError,
    OdosError,
    OdosHTTPError,
    OdosMalformedResponseError,
    OdosNetworkError,
    OdosRateLimitError,
    OdosServerError,
    OdosTimeoutError,
    OdosUnsupportedChainError,
    OdosValidationError,
)
from .models import (
    AssemblyRequest,
    InputToken,
    OutputToken,
    Quote,
    QuoteRequest,
    Simulation,
    TransactionRequest,
)
from .request_options import RequestOptions
from .retry import RetryConfig, RetryPolicy
from .routers import RouterType, router_address, v3_router_address
from .security import ApiKey
from .swap_builder import AsyncSwapBuilder, SwapBuilder
from .values import ReferralCode, Slippage

__version__ = "0.1.0"

__all__ = [
    "SUPPORTED_CHAINS",
    "DEFAULT_RETRY_DELAY",
    "ApiHost",
    "ApiKey",
    "ApiVersion",
    "AssemblyRequest",
    "AsyncOdosClient",
    "AsyncSwapBuilder",
    "Chain",
    "ClientConfig",
    "Endpoint",
    "ErrorCategory",
    "ErrorKind",
    "InputToken",
    "OdosClient",
    "OdosClientError",
    "OdosError",
    "OdosErrorCode",
    "OdosHTTPError",
    "OdosMalformedResponseError",
    "OdosNetworkError",
    "OdosRateLimitError",
    "OdosServerError",
    "OdosTimeoutError",
    "OdosUnsupportedChainError",
    "OdosValidationError",
    "OutputToken",
    "Quote",
    "QuoteRequest",
    "ReferralCode",
    "RequestOptions",
    "RetryConfig",
    "RetryPolicy",
    "RouterType",
    "Simulation",
    "Slippage",
    "SwapBuilder",
    "TransactionRequest",
    "router_address",
    "v3_router_address",
]
