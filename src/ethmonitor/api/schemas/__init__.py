"""Pydantic schemas for API responses."""

from ethmonitor.api.schemas.report import (
    TokenBalanceResponse,
    HistoricalTransferResponse,
    WalletAnalysisResponse,
    BalancesResponse,
    TransfersResponse,
)

__all__ = [
    "TokenBalanceResponse",
    "HistoricalTransferResponse",
    "WalletAnalysisResponse",
    "BalancesResponse",
    "TransfersResponse",
]
