"""Cache-aside façade over the upstream data providers."""

import logging
from typing import Callable, Hashable, TypeVar

from ethmonitor.cache import CacheLayer, CacheProfiles
from ethmonitor.core.exceptions import UpstreamError
from ethmonitor.domain.models import (
    NativeBalanceResponse,
    TokenBalancesResponse,
    TokenMetadataResponse,
    TokenPriceResponse,
    TransferResponse,
)
from ethmonitor.providers import (
    BalancesProvider,
    PricesProvider,
    TokenProvider,
    TransfersProvider,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Price lookups by address and by symbol share one cache; keys are namespaced
PRICE_BY_ADDRESS = "address"
PRICE_BY_SYMBOL = "symbol"


class CachedApiService:
    """
    The single data-access point of the enrichment pipelines.

    Every read consults its cache first and falls through to the provider on
    a miss. Concurrent misses for one key share a single upstream call.
    Provider failures are logged and re-raised; they are never cached.
    """

    def __init__(
        self,
        balances_provider: BalancesProvider,
        prices_provider: PricesProvider,
        token_provider: TokenProvider,
        transfers_provider: TransfersProvider,
        balances_cache: CacheLayer,
        native_balance_cache: CacheLayer,
        price_cache: CacheLayer,
        token_cache: CacheLayer,
        transfer_cache: CacheLayer,
    ):
        self._balances = balances_provider
        self._prices = prices_provider
        self._tokens = token_provider
        self._transfers = transfers_provider
        self._balances_cache = balances_cache
        self._native_balance_cache = native_balance_cache
        self._price_cache = price_cache
        self._token_cache = token_cache
        self._transfer_cache = transfer_cache

    @classmethod
    def from_profiles(
        cls,
        balances_provider: BalancesProvider,
        prices_provider: PricesProvider,
        token_provider: TokenProvider,
        transfers_provider: TransfersProvider,
        profiles: CacheProfiles,
    ) -> "CachedApiService":
        """Build the façade with fresh caches sized by `profiles`."""
        return cls(
            balances_provider=balances_provider,
            prices_provider=prices_provider,
            token_provider=token_provider,
            transfers_provider=transfers_provider,
            balances_cache=profiles.balances.build("balances"),
            native_balance_cache=profiles.native_balance.build("native_balance"),
            price_cache=profiles.prices.build("prices"),
            token_cache=profiles.token_metadata.build("token_metadata"),
            transfer_cache=profiles.transfers.build("transfers"),
        )

    def get_token_balances(self, address: str) -> TokenBalancesResponse:
        return self._read(
            self._balances_cache,
            address.lower(),
            lambda _: self._balances.get_token_balances(address),
            f"token balances for {address}",
        )

    def get_native_balance(self, address: str) -> NativeBalanceResponse:
        return self._read(
            self._native_balance_cache,
            address.lower(),
            lambda _: self._balances.get_native_balance(address),
            f"native balance for {address}",
        )

    def get_usd_price(self, token_address: str) -> TokenPriceResponse:
        return self._read(
            self._price_cache,
            (PRICE_BY_ADDRESS, token_address.lower()),
            lambda _: self._prices.get_usd_price(token_address),
            f"USD price for {token_address}",
        )

    def get_usd_price_by_symbol(self, symbol: str) -> TokenPriceResponse:
        return self._read(
            self._price_cache,
            (PRICE_BY_SYMBOL, symbol.upper()),
            lambda _: self._prices.get_usd_price_by_symbol(symbol),
            f"USD price for symbol {symbol}",
        )

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        return self._read(
            self._token_cache,
            token_address.lower(),
            lambda _: self._tokens.get_token_metadata(token_address),
            f"token metadata for {token_address}",
        )

    def get_transfers(self, address: str, max_count: int) -> TransferResponse:
        # A broader request must not reuse a narrower page set
        return self._read(
            self._transfer_cache,
            (address.lower(), max_count),
            lambda _: self._transfers.get_transfers(address, max_count),
            f"transfers for {address}",
        )

    def clear_caches(self) -> None:
        """Drop every cached upstream response."""
        for cache in (
            self._balances_cache,
            self._native_balance_cache,
            self._price_cache,
            self._token_cache,
            self._transfer_cache,
        ):
            cache.clear()
        logger.info("Cleared upstream caches")

    @staticmethod
    def _read(
        cache: CacheLayer,
        key: Hashable,
        fetch: Callable[[Hashable], V],
        what: str,
    ) -> V:
        def _load(k: Hashable) -> V:
            try:
                return fetch(k)
            except UpstreamError as e:
                logger.error("Error fetching %s: %s", what, e.message)
                raise

        return cache.get_or_compute(key, _load)
