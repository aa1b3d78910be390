"""Exception hierarchy for wallet intelligence."""


class WalletIntelError(Exception):
    """Base class for all wallet intelligence errors."""


class InvalidAddressError(WalletIntelError, ValueError):
    """Address does not start with a recognised Stacks mainnet prefix."""

