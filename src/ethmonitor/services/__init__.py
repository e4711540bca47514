"""Service layer - data access, enrichment and analysis."""

from ethmonitor.services.api_service import CachedApiService
from ethmonitor.services.task_runner import run_batch
from ethmonitor.services.balance_service import BalanceService, HeldToken
from ethmonitor.services.transfer_service import TransferService
from ethmonitor.services.swap_detector import SwapDetector, KNOWN_DEX_CONTRACTS
from ethmonitor.services.wallet_analyzer import WalletAnalyzer

__all__ = [
    "CachedApiService",
    "run_batch",
    "BalanceService",
    "HeldToken",
    "TransferService",
    "SwapDetector",
    "KNOWN_DEX_CONTRACTS",
    "WalletAnalyzer",
]
