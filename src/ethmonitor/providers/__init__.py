"""Upstream data providers."""

from ethmonitor.providers.http_client import JsonHttpClient, RequestsHttpClient
from ethmonitor.providers.data_provider import (
    BalancesProvider,
    PricesProvider,
    TokenProvider,
    TransfersProvider,
)
from ethmonitor.providers.alchemy_balances import AlchemyBalancesProvider
from ethmonitor.providers.alchemy_prices import AlchemyPricesProvider
from ethmonitor.providers.alchemy_tokens import AlchemyTokenProvider
from ethmonitor.providers.alchemy_transfers import AlchemyTransfersProvider, PAGE_SIZE

__all__ = [
    "JsonHttpClient",
    "RequestsHttpClient",
    "BalancesProvider",
    "PricesProvider",
    "TokenProvider",
    "TransfersProvider",
    "AlchemyBalancesProvider",
    "AlchemyPricesProvider",
    "AlchemyTokenProvider",
    "AlchemyTransfersProvider",
    "PAGE_SIZE",
]
