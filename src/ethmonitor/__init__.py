"""Ethereum wallet monitor: balances, transfers and swap estimates for an address."""

__version__ = "0.1.0"
