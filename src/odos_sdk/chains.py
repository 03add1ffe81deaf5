"""Chains served by the Odos router."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from .exceptions import OdosUnsupportedChainError

SUPPORTED_CHAINS = MappingProxyType(
    {
        1: "ethereum",
        10: "optimism",
        56: "bsc",
        130: "unichain",
        137: "polygon",
        146: "sonic",
        252: "fraxtal",
        324: "zksync",
        5000: "mantle",
        8453: "base",
        34443: "mode",
        42161: "arbitrum",
        43114: "avalanche",
        59144: "linea",
        80094: "berachain",
        534352: "scroll",
    }
)

_IDS_BY_NAME = {name: chain_id for chain_id, name in SUPPORTED_CHAINS.items()}


@dataclass(frozen=True, order=True)
class Chain:
    """A supported chain id. Construction fails for any other id."""

    chain_id: int

    def __post_init__(self) -> None:
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int):
            raise OdosUnsupportedChainError(f"Chain id must be an integer: {self.chain_id!r}")
        if self.chain_id not in SUPPORTED_CHAINS:
            raise OdosUnsupportedChainError(
                f"Unsupported chain: Chain ID {self.chain_id}", chain_id=self.chain_id
            )

    @classmethod
    def from_chain_id(cls, chain_id: int) -> "Chain":
        return cls(chain_id)

    @classmethod
    def from_name(cls, name: str) -> "Chain":
        try:
            return cls(_IDS_BY_NAME[name.strip().lower()])
        except KeyError:
            raise OdosUnsupportedChainError(f"Unsupported chain: {name}") from None

    @classmethod
    def coerce(cls, value: "Chain | int | str") -> "Chain":
        if isinstance(value, Chain):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        return cls(value)

    @property
    def id(self) -> int:
        return self.chain_id

    @property
    def name(self) -> str:
        return SUPPORTED_CHAINS[self.chain_id]

    def __int__(self) -> int:
        return self.chain_id

    def __str__(self) -> str:
        return self.name

    @classmethod
    def ethereum(cls) -> "Chain":
        return cls(1)

    @classmethod
    def optimism(cls) -> "Chain":
        return cls(10)

    @classmethod
    def bsc(cls) -> "Chain":
        return cls(56)

    @classmethod
    def unichain(cls) -> "Chain":
        return cls(130)

    @classmethod
    def polygon(cls) -> "Chain":
        return cls(137)

    @classmethod
    def sonic(cls) -> "Chain":
        return cls(146)

    @classmethod
    def fraxtal(cls) -> "Chain":
        return cls(252)

    @classmethod
    def zksync(cls) -> "Chain":
        return cls(324)

    @classmethod
    def mantle(cls) -> "Chain":
        return cls(5000)

    @classmethod
    def base(cls) -> "Chain":
        return cls(8453)

    @classmethod
    def mode(cls) -> "Chain":
        return cls(34443)

    @classmethod
    def arbitrum(cls) -> "Chain":
        return cls(42161)

    @classmethod
    def avalanche(cls) -> "Chain":
        return cls(43114)

    @classmethod
    def linea(cls) -> "Chain":
        return cls(59144)

    @classmethod
    def berachain(cls) -> "Chain":
        return cls(80094)

    @classmethod
    def scroll(cls) -> "Chain":
        return cls(534352)
