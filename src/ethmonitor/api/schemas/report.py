"""Pydantic schemas for wallet analysis responses."""

from decimal import Decimal

from pydantic import BaseModel

from ethmonitor.domain.schemas import (
    HistoricalTransferResponse,
    TokenBalanceResponse,
    WalletAnalysisResponse,
)

__all__ = [
    "TokenBalanceResponse",
    "HistoricalTransferResponse",
    "WalletAnalysisResponse",
    "BalancesResponse",
    "TransfersResponse",
]


class BalancesResponse(BaseModel):
    """Response schema for the balances listing."""

    wallet_address: str
    balances: list[TokenBalanceResponse]
    total_balance_usd: Decimal


class TransfersResponse(BaseModel):
    """Response schema for the transfers listing."""

    wallet_address: str
    transfers: list[HistoricalTransferResponse]
    total_volume_usd: Decimal
