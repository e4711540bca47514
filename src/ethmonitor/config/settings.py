"""Application settings and configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ETHMONITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Ethereum Wallet Monitor"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    # Per-logger overrides, e.g. {"ethmonitor.services.task_runner": "DEBUG"}
    logger_levels: dict[str, str] = Field(default_factory=dict)

    # Upstream provider
    network: str = "eth-mainnet"
    rpc_base_url: str = "https://eth-mainnet.g.alchemy.com/v2"
    prices_base_url: str = "https://api.g.alchemy.com/prices/v1"

    # One key for everything, or one key per data source
    alchemy_api_key: str = ""
    balances_api_key: Optional[str] = None
    prices_api_key: Optional[str] = None
    tokens_api_key: Optional[str] = None
    transfers_api_key: Optional[str] = None

    http_timeout_seconds: float = 10.0

    # Enrichment
    task_timeout_seconds: float = 15.0
    max_workers: int = 32
    default_transfer_count: int = 1000

    # Cache profiles (max entries / TTL seconds)
    balances_cache_size: int = 10_000
    balances_cache_ttl_seconds: float = 300
    prices_cache_size: int = 1_000
    prices_cache_ttl_seconds: float = 30
    token_cache_size: int = 5_000
    token_cache_ttl_seconds: float = 3600
    native_balance_cache_size: int = 2_000
    native_balance_cache_ttl_seconds: float = 120
    transfers_cache_size: int = 1_000
    transfers_cache_ttl_seconds: float = 600
    valued_balances_cache_size: int = 1_000
    valued_balances_cache_ttl_seconds: float = 120

    # Additional router/factory addresses treated as DEX contracts
    extra_dex_contracts: list[str] = Field(default_factory=list)

    def resolve_api_keys(self) -> tuple[str, str, str, str]:
        """Return (balances, prices, tokens, transfers) keys, falling back to alchemy_api_key."""
        fallback = self.alchemy_api_key
        return (
            self.balances_api_key or fallback,
            self.prices_api_key or fallback,
            self.tokens_api_key or fallback,
            self.transfers_api_key or fallback,
        )


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (used by the CLI and tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
