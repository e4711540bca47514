"""Serializable forms of the analysis views, shared by the API and the exporter."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from ethmonitor.domain.views import HistoricalTransfer, TokenBalance, WalletAnalysisReport


class TokenBalanceResponse(BaseModel):
    """Response schema for a single valued balance."""

    symbol: Optional[str] = None
    contract_address: str
    balance: Decimal
    usd_value: Decimal

    @classmethod
    def from_view(cls, balance: TokenBalance) -> "TokenBalanceResponse":
        return cls(
            symbol=balance.symbol,
            contract_address=balance.contract_address,
            balance=balance.balance,
            usd_value=balance.usd_value,
        )


class HistoricalTransferResponse(BaseModel):
    """Response schema for a single transfer."""

    tx_hash: Optional[str] = None
    timestamp: datetime
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    asset: Optional[str] = None
    value: Decimal
    category: Optional[str] = None
    raw_contract_address: Optional[str] = None

    @classmethod
    def from_view(cls, transfer: HistoricalTransfer) -> "HistoricalTransferResponse":
        return cls(
            tx_hash=transfer.tx_hash,
            timestamp=transfer.timestamp,
            from_address=transfer.from_address,
            to_address=transfer.to_address,
            asset=transfer.asset,
            value=transfer.value,
            category=transfer.category,
            raw_contract_address=transfer.raw_contract_address,
        )


class WalletAnalysisResponse(BaseModel):
    """Response schema for a full wallet analysis."""

    wallet_address: str
    total_transaction_count: int
    total_volume_usd: Decimal
    estimated_swap_count: int
    total_balance_usd: Decimal
    balances: list[TokenBalanceResponse]
    transfers: list[HistoricalTransferResponse]

    @classmethod
    def from_report(cls, report: WalletAnalysisReport) -> "WalletAnalysisResponse":
        return cls(
            wallet_address=report.wallet_address,
            total_transaction_count=report.total_transaction_count,
            total_volume_usd=report.total_volume_usd,
            estimated_swap_count=report.estimated_swap_count,
            total_balance_usd=report.total_balance_usd,
            balances=[TokenBalanceResponse.from_view(b) for b in report.balances],
            transfers=[HistoricalTransferResponse.from_view(t) for t in report.transfers],
        )
