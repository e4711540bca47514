"""View models for service outputs."""

from ethmonitor.domain.views.report import (
    NATIVE_CONTRACT_ADDRESS,
    NATIVE_SYMBOL,
    NATIVE_DECIMALS,
    TokenBalance,
    HistoricalTransfer,
    WalletAnalysisReport,
)

__all__ = [
    "NATIVE_CONTRACT_ADDRESS",
    "NATIVE_SYMBOL",
    "NATIVE_DECIMALS",
    "TokenBalance",
    "HistoricalTransfer",
    "WalletAnalysisReport",
]
