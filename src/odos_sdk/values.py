"""Validated value types used by the swap builder."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

from .exceptions import OdosValidationError

MAX_SLIPPAGE_PERCENT = 50.0
MAX_REFERRAL_CODE = 2**32 - 1


@dataclass(frozen=True, order=True)
class Slippage:
    """Maximum tolerated slippage, held as a percentage in (0, 50].

    ``Slippage.percent(0.5)`` and ``Slippage.bps(50)`` are equal.
    """

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise OdosValidationError(f"Slippage must be a number: {self.value!r}")
        if not math.isfinite(self.value):
            raise OdosValidationError(f"Slippage must be finite: {self.value}")
        if self.value <= 0:
            raise OdosValidationError(f"Slippage percentage must be greater than 0: {self.value}")
        if self.value > MAX_SLIPPAGE_PERCENT:
            raise OdosValidationError(
                f"Slippage percentage cannot exceed {MAX_SLIPPAGE_PERCENT:g}%: {self.value}"
            )
        object.__setattr__(self, "value", float(self.value))

    @classmethod
    def percent(cls, percent: float) -> "Slippage":
        return cls(percent)

    @classmethod
    def bps(cls, bps: int) -> "Slippage":
        if isinstance(bps, bool) or not isinstance(bps, int):
            raise OdosValidationError(f"Slippage basis points must be an integer: {bps!r}")
        return cls(bps / 100)

    @classmethod
    def coerce(cls, value: "Slippage | float") -> "Slippage":
        """Accept a Slippage or a bare percentage."""
        return value if isinstance(value, Slippage) else cls.percent(value)

    @property
    def as_percent(self) -> float:
        return self.value

    @property
    def as_bps(self) -> int:
        return round(self.value * 100)

    @classmethod
    def low(cls) -> "Slippage":
        return cls(0.1)

    @classmethod
    def standard(cls) -> "Slippage":
        return cls(0.5)

    @classmethod
    def medium(cls) -> "Slippage":
        return cls(1.0)

    @classmethod
    def high(cls) -> "Slippage":
        return cls(3.0)

    def __str__(self) -> str:
        return f"{self.value:.2f}%"


@dataclass(frozen=True, order=True)
class ReferralCode:
    """Odos referral code; ``ReferralCode.NONE`` (0) means no referral."""

    code: int = 0

    NONE: ClassVar["ReferralCode"]

    def __post_init__(self) -> None:
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise OdosValidationError(f"Referral code must be an integer: {self.code!r}")
        if not 0 <= self.code <= MAX_REFERRAL_CODE:
            raise OdosValidationError(f"Referral code out of range: {self.code}")

    @classmethod
    def coerce(cls, value: "ReferralCode | int | None") -> "ReferralCode":
        if value is None:
            return cls.NONE
        return value if isinstance(value, ReferralCode) else cls(value)

    @property
    def is_none(self) -> bool:
        return self.code == 0

    def __int__(self) -> int:
        return self.code

    def __str__(self) -> str:
        return "None" if self.is_none else str(self.code)


ReferralCode.NONE = ReferralCode(0)
