"""Static classification tables for tokens and protocol contracts. No I/O."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from ..models import PositionType, TokenCategory


@dataclass(frozen=True)
class ProtocolInfo:
    name: str
    type: PositionType


BLUE_CHIP_TOKENS: frozenset[str] = frozenset(
    s.upper() for s in ("STX", "sBTC", "xBTC", "USDA", "sUSDT", "ALEX", "VELAR")
)

HIGH_RISK_TOKENS: frozenset[str] = frozenset(
    ("WELSH", "LEO", "PEPE", "NOT", "DROID", "ODIN", "ROO", "GIGA", "MOON")
)

DEFI_CONTRACT_FRAGMENTS: tuple[str, ...] = ("alex", "velar", "arkadiko")

# Declaration order is the match order.
DEFI_PROTOCOLS: MappingProxyType[str, ProtocolInfo] = MappingProxyType(
    {
        "SP3K8BC0PPEVCV7NZ6QSRWPQ2JE9E5B6N3PA0KBR9.alex-vault": ProtocolInfo("ALEX", "vault"),
        "SP3K8BC0PPEVCV7NZ6QSRWPQ2JE9E5B6N3PA0KBR9.alex-reserve-pool": ProtocolInfo("ALEX", "staking"),
        "SP3K8BC0PPEVCV7NZ6QSRWPQ2JE9E5B6N3PA0KBR9.alex-launchpad": ProtocolInfo("ALEX", "staking"),
        "SP1Y5YSTAHZ88XYK1VPDH24GY0HPX5J4JECTMY4A1.velar-v2-swap": ProtocolInfo("Velar", "dex"),
        "SP2C2YFP12AJZB4MABJBAJ55XECVS7E4PMMZ89YZR.arkadiko-swap-v2-1": ProtocolInfo("Arkadiko", "dex"),
        "SP2C2YFP12AJZB4MABJBAJ55XECVS7E4PMMZ89YZR.arkadiko-vaults-v1-1": ProtocolInfo("Arkadiko", "vault"),
        "SP2C2YFP12AJZB4MABJBAJ55XECVS7E4PMMZ89YZR.arkadiko-stake-pool-v2-1": ProtocolInfo("Arkadiko", "staking"),
        "SP4SZE494VC2YC5JYG7AYFQ44F5Q4PYV7DVMDPBG.stacking-dao-core-v1": ProtocolInfo("StackingDAO", "staking"),
        "SM3KNVZS30WM7F89SXKVVFY4SN9RMPZZ9FX929N0V.sbtc-deposit": ProtocolInfo("sBTC", "vault"),
        "SP3DX3H4FEYZJZ586MFBS25ZW3HZDMEW92260R2PR.Wrapped-Bitcoin": ProtocolInfo("xBTC", "vault"),
    }
)


def deployer_of(contract_id: str) -> str:
    """Return the deployer address of a ``<address>.<name>`` contract id."""
    return contract_id.split(".", 1)[0]


def categorize_token(symbol: str, contract: str) -> TokenCategory:
    """Assign a token to blue-chip / meme / defi / other.

    Symbol membership is checked case-insensitively, blue-chip first. The
    defi fallback is a substring match on the contract identifier.
    """
    upper_symbol = symbol.upper()
    if upper_symbol in BLUE_CHIP_TOKENS:
        return "blue-chip"
    if upper_symbol in HIGH_RISK_TOKENS:
        return "meme"
    if any(fragment in contract for fragment in DEFI_CONTRACT_FRAGMENTS):
        return "defi"
    return "other"


def match_protocol(contract_id: str) -> ProtocolInfo | None:
    """Return the first protocol whose deployer address occurs in ``contract_id``."""
    for known_contract, info in DEFI_PROTOCOLS.items():
        if deployer_of(known_contract) in contract_id:
            return info
    return None
