"""Router contract addresses per chain.

The V3 router shares one address on every supported chain; V2 and limit
order routers are deployed per chain.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Callable

from .chains import SUPPORTED_CHAINS
from .exceptions import OdosUnsupportedChainError

RouterLookup = Callable[[int], str]

ODOS_V3_ROUTER = "0x0D05a7D3448512B78fa8A9e46c4872C88C4a0D05"

V2_ROUTERS = MappingProxyType(
    {
        1: "0xCf5540fFFCdC3d510B18bFcA6d2b9987b0772559",
        10: "0xCa423977156BB05b13A2BA3b76Bc5419E2fE9680",
        56: "0x89b8AA89FDd0507a99d334CBe3C808fAFC7d850E",
        130: "0x6409722F3a1C4486A3b1FE566cBDd5e9D946A1f3",
        137: "0x4E3288c9ca110bCC82bf38F09A7b425c095d92Bf",
        146: "0xaC041Df48dF9791B0654f1Dbbf2CC8450C5f2e9D",
        252: "0x56c85a254DD12eE8D9C04049a4ab62769Ce98210",
        324: "0x4bBa932E9792A2b917D47830C93a9BC79320E4f7",
        5000: "0xD9F4e85489aDCD0bAF0Cd63b4231c6af58c26745",
        8453: "0x19cEeAd7105607Cd444F5ad10dd51356436095a1",
        34443: "0x7E15EB462cdc67Cf92Af1f7102465a8F8c784874",
        42161: "0xa669e7A0d4b3e4Fa48af2dE86BD4CD7126Be4e13",
        43114: "0x88de50B233052e4Fb783d4F6db78Cc34fEa3e9FC",
        59144: "0x2d8879046f1559E53eb052E949e9544bCB72f414",
        534352: "0xbFe03C9E20a9Fc0b37de01A172F207004935E0b1",
    }
)

LIMIT_ORDER_ROUTERS = MappingProxyType(
    {
        1: "0x5F79636fa7bc622eA48802E6cf80A5dae814daE1",
        10: "0xcbF3822A63B7867cD602317fB4aE3ca864826ef8",
        56: "0x0D4aB12E62D17f037D43F018Da18FF623e1AF3B2",
        130: "0x372d96eDA72bEA64dfCa3577d04382E4dbE2Ff2b",
        137: "0x93052961c75c92Fd5d6362655936C239EF2D5336",
        146: "0xB9CBD870916e9Ffc52076Caa714f85a022B7f330",
        252: "0x5E0aFaD0f658f9689806296e0509AfFC191d9a09",
        324: "0x74ab8c1247aE3C5FFFD9F85781F31751bdd98E73",
        5000: "0xa05A88037402d869b7CA69F5bEc098E19BeDaFbB",
        8453: "0xeDeAfdEf0901eF74Ee28c207BE8424D3B353D97A",
        34443: "0x8073e286DaDc6d92BefC8f436c5BcDFcE213e681",
        42161: "0x7432657cDda02226ac2aAc9d8f552Ee9613B064e",
        43114: "0xcc0126349d1bD892D1C53381E68dBF0c8F0E045e",
        59144: "0xb3a9B56056a5c93F468dF62579b9A5BEa1741069",
        80094: "0x3236d3d12b7981aa5043bd66d1b9d6856bf764dc",
        534352: "0x468633515c46EfFCC77Caa949ce8775505e5deDA",
    }
)


class RouterType(str, Enum):
    V2 = "v2"
    V3 = "v3"
    LIMIT_ORDER = "limit_order"

    @property
    def emits_swap_events(self) -> bool:
        return self in (RouterType.V2, RouterType.V3)


def router_address(chain_id: int, router_type: RouterType = RouterType.V3) -> str:
    """Address of the ``router_type`` router on ``chain_id``."""
    chain_id = int(chain_id)
    if router_type is RouterType.V3:
        address = ODOS_V3_ROUTER if chain_id in SUPPORTED_CHAINS else None
    elif router_type is RouterType.V2:
        address = V2_ROUTERS.get(chain_id)
    else:
        address = LIMIT_ORDER_ROUTERS.get(chain_id)
    if address is None:
        raise OdosUnsupportedChainError(
            f"{router_type.value} router not available on chain {chain_id}", chain_id=chain_id
        )
    return address


def v3_router_address(chain_id: int) -> str:
    return router_address(chain_id, RouterType.V3)


def supported_router_types(chain_id: int) -> list[RouterType]:
    supported = []
    for router_type in RouterType:
        try:
            router_address(chain_id, router_type)
        except OdosUnsupportedChainError:
            continue
        supported.append(router_type)
    return supported
