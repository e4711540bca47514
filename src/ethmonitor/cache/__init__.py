"""Cache layer for upstream data."""

from ethmonitor.cache.cache_layer import CacheLayer, TTLCacheLayer
from ethmonitor.cache.profiles import CacheProfile, CacheProfiles

__all__ = [
    "CacheLayer",
    "TTLCacheLayer",
    "CacheProfile",
    "CacheProfiles",
]
