from __future__ import annotations

import math

import pytest

from odos_sdk.chains import SUPPORTED_CHAINS, Chain
from odos_sdk.exceptions import OdosUnsupportedChainError, OdosValidationError
from odos_sdk.routers import (
    ODOS_V3_ROUTER,
    RouterType,
    router_address,
    supported_router_types,
    v3_router_address,
)
from odos_sdk.values import ReferralCode, Slippage


@pytest.mark.parametrize("percent", [0.01, 0.5, 1, 3.0, 50])
def test_slippage_accepts_valid_percentages(percent: float) -> None:
    assert Slippage.percent(percent).as_percent == pytest.approx(percent)


@pytest.mark.parametrize("percent", [0, -1, 50.01, 100, math.nan, math.inf])
def test_slippage_rejects_out_of_range(percent: float) -> None:
    with pytest.raises(OdosValidationError):
        Slippage.percent(percent)


def test_slippage_percent_and_bps_agree() -> None:
    assert Slippage.percent(0.5) == Slippage.bps(50)
    assert Slippage.bps(50).as_bps == 50
    assert Slippage.bps(5000).as_percent == 50.0
    with pytest.raises(OdosValidationError):
        Slippage.bps(5001)
    with pytest.raises(OdosValidationError):
        Slippage.bps(0)


def test_slippage_presets() -> None:
    assert Slippage.low() < Slippage.standard() < Slippage.medium() < Slippage.high()
    assert str(Slippage.standard()) == "0.50%"
    assert Slippage.coerce(1.0) == Slippage.medium()


def test_referral_code() -> None:
    assert ReferralCode.NONE.is_none
    assert ReferralCode.coerce(None) is ReferralCode.NONE
    assert int(ReferralCode(1234)) == 1234
    assert str(ReferralCode(0)) == "None"
    with pytest.raises(OdosValidationError):
        ReferralCode(-1)
    with pytest.raises(OdosValidationError):
        ReferralCode(2**32)


def test_chain_construction() -> None:
    assert Chain.ethereum().id == 1
    assert Chain.from_name("Arbitrum") == Chain(42161)
    assert Chain.coerce(8453) == Chain.base()
    assert str(Chain.polygon()) == "polygon"
    assert len(SUPPORTED_CHAINS) == 16


@pytest.mark.parametrize("chain_id", [0, 3, 999999])
def test_unsupported_chain_is_rejected(chain_id: int) -> None:
    with pytest.raises(OdosUnsupportedChainError) as excinfo:
        Chain(chain_id)
    assert excinfo.value.chain_id == chain_id


def test_router_addresses() -> None:
    assert v3_router_address(1) == ODOS_V3_ROUTER
    assert router_address(8453, RouterType.V2) == "0x19cEeAd7105607Cd444F5ad10dd51356436095a1"
    assert RouterType.V3.emits_swap_events
    assert not RouterType.LIMIT_ORDER.emits_swap_events


def test_router_missing_on_chain() -> None:
    with pytest.raises(OdosUnsupportedChainError):
        router_address(80094, RouterType.V2)
    with pytest.raises(OdosUnsupportedChainError):
        v3_router_address(999999)
    assert supported_router_types(80094) == [RouterType.V3, RouterType.LIMIT_ORDER]
