"""Wallet intelligence reports for Stacks accounts."""

__version__ = "2.0.0"
