"""Input validation performed before a report is generated."""
from __future__ import annotations

from .errors import InvalidAddressError

STACKS_ADDRESS_PREFIXES = ("SP", "SM")


def validate_address(address: str) -> str:
    """Return ``address`` unchanged or raise :class:`InvalidAddressError`."""
    if not address or not address.startswith(STACKS_ADDRESS_PREFIXES):
        raise InvalidAddressError(f"Invalid Stacks address: {address!r}")
    return address
