"""Wallet analysis endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ethmonitor.api.deps import (
    get_balance_service,
    get_transfer_service,
    get_wallet_analyzer,
    valid_address,
)
from ethmonitor.api.schemas import (
    BalancesResponse,
    HistoricalTransferResponse,
    TokenBalanceResponse,
    TransfersResponse,
    WalletAnalysisResponse,
)
from ethmonitor.config.settings import get_settings
from ethmonitor.core.exceptions import AnalysisError, AppError
from ethmonitor.core.numeric import round_usd, sum_decimals
from ethmonitor.services import BalanceService, TransferService, WalletAnalyzer

router = APIRouter(prefix="/wallets", tags=["wallets"])

MAX_TRANSFERS_LIMIT = 10_000


def _max_transfers(
    max_transfers: Optional[int] = Query(
        None,
        ge=1,
        le=MAX_TRANSFERS_LIMIT,
        description="Maximum number of transfers to analyze (settings default if empty)",
    ),
) -> int:
    if max_transfers is None:
        return get_settings().default_transfer_count
    return max_transfers


@router.get("/{address}/analysis", response_model=WalletAnalysisResponse)
def analyze_wallet(
    wallet: str = Depends(valid_address),
    max_transfers: int = Depends(_max_transfers),
    analyzer: WalletAnalyzer = Depends(get_wallet_analyzer),
) -> WalletAnalysisResponse:
    """Run the full analysis for a wallet."""
    report = analyzer.analyze(wallet, max_transfers)
    return WalletAnalysisResponse.from_report(report)


@router.get("/{address}/balances", response_model=BalancesResponse)
def get_balances(
    wallet: str = Depends(valid_address),
    balances: BalanceService = Depends(get_balance_service),
) -> BalancesResponse:
    """Get USD-valued token balances, native coin last."""
    try:
        valued = balances.get_token_balances_with_usd(wallet)
    except AppError as e:
        raise AnalysisError("balances", wallet, e.message) from e

    return BalancesResponse(
        wallet_address=wallet,
        balances=[TokenBalanceResponse.from_view(b) for b in valued],
        total_balance_usd=round_usd(sum_decimals(b.usd_value for b in valued)),
    )


@router.get("/{address}/transfers", response_model=TransfersResponse)
def get_transfers(
    wallet: str = Depends(valid_address),
    max_transfers: int = Depends(_max_transfers),
    transfers: TransferService = Depends(get_transfer_service),
) -> TransfersResponse:
    """Get the wallet's incoming transfer history."""
    try:
        history = transfers.get_historical_transfers(wallet, max_transfers)
    except AppError as e:
        raise AnalysisError("transfers", wallet, e.message) from e

    return TransfersResponse(
        wallet_address=wallet,
        transfers=[HistoricalTransferResponse.from_view(t) for t in history],
        total_volume_usd=round_usd(sum_decimals(t.value for t in history)),
    )
