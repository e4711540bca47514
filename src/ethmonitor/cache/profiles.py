"""Cache size/TTL profiles, one per data kind."""

from dataclasses import dataclass

from ethmonitor.cache.cache_layer import TTLCacheLayer
from ethmonitor.config.settings import Settings


@dataclass(frozen=True)
class CacheProfile:
    """Size limit and time-to-live for one cache instance."""

    max_size: int
    ttl_seconds: float

    def build(self, name: str) -> TTLCacheLayer:
        return TTLCacheLayer(max_size=self.max_size, ttl_seconds=self.ttl_seconds, name=name)


@dataclass(frozen=True)
class CacheProfiles:
    """
    Profiles for the six caches of an analysis context.

    Balances churn faster than token metadata but slower than prices.
    """

    balances: CacheProfile = CacheProfile(10_000, 300)
    prices: CacheProfile = CacheProfile(1_000, 30)
    token_metadata: CacheProfile = CacheProfile(5_000, 3600)
    native_balance: CacheProfile = CacheProfile(2_000, 120)
    transfers: CacheProfile = CacheProfile(1_000, 600)
    valued_balances: CacheProfile = CacheProfile(1_000, 120)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheProfiles":
        return cls(
            balances=CacheProfile(settings.balances_cache_size, settings.balances_cache_ttl_seconds),
            prices=CacheProfile(settings.prices_cache_size, settings.prices_cache_ttl_seconds),
            token_metadata=CacheProfile(settings.token_cache_size, settings.token_cache_ttl_seconds),
            native_balance=CacheProfile(
                settings.native_balance_cache_size, settings.native_balance_cache_ttl_seconds
            ),
            transfers=CacheProfile(settings.transfers_cache_size, settings.transfers_cache_ttl_seconds),
            valued_balances=CacheProfile(
                settings.valued_balances_cache_size, settings.valued_balances_cache_ttl_seconds
            ),
        )
