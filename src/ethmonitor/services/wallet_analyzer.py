"""Wallet analysis: runs both enrichment pipelines and aggregates the report."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional, TypeVar, Union

from ethmonitor.core.exceptions import AnalysisError, AppError
from ethmonitor.core.numeric import round_usd, sum_decimals
from ethmonitor.domain.views import WalletAnalysisReport
from ethmonitor.export import ReportExporter
from ethmonitor.services.balance_service import BalanceService
from ethmonitor.services.swap_detector import SwapDetector
from ethmonitor.services.transfer_service import TransferService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WalletAnalyzer:
    """
    Builds a WalletAnalysisReport for an address.

    The transfer and balance pipelines are independent and run side by side.
    Per-item failures inside them only shrink the report; a failure to fetch
    either base list fails the analysis with AnalysisError.
    """

    def __init__(
        self,
        transfer_service: TransferService,
        balance_service: BalanceService,
        swap_detector: SwapDetector,
        pipeline_executor: Optional[ThreadPoolExecutor] = None,
        exporter: Optional[ReportExporter] = None,
    ):
        self._transfers = transfer_service
        self._balances = balance_service
        self._swap_detector = swap_detector
        self._owns_executor = pipeline_executor is None
        self._pipelines = pipeline_executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="pipeline"
        )
        self._exporter = exporter or ReportExporter(swap_detector)

    def analyze(self, address: str, max_count: int) -> WalletAnalysisReport:
        """
        Analyze `address`, looking at up to `max_count` transfers.

        The address must already be validated by the caller.
        """
        logger.info("Analyzing %s (up to %d transfers)", address, max_count)
        transfers_future = self._pipelines.submit(
            self._transfers.get_historical_transfers, address, max_count
        )
        balances_future = self._pipelines.submit(
            self._balances.get_token_balances_with_usd, address
        )
        wait([transfers_future, balances_future])

        transfers = self._result(transfers_future, "transfers", address)
        balances = self._result(balances_future, "balances", address)

        swap_count = self._swap_detector.count_swaps(transfers)
        total_volume = round_usd(sum_decimals(t.value for t in transfers))
        total_balance = round_usd(sum_decimals(b.usd_value for b in balances))

        report = WalletAnalysisReport(
            wallet_address=address,
            total_transaction_count=len(transfers),
            total_volume_usd=total_volume,
            estimated_swap_count=swap_count,
            balances=tuple(balances),
            transfers=tuple(transfers),
            total_balance_usd=total_balance,
        )
        logger.info(
            "Analysis of %s done: %d transfers, %d swaps, %d balances worth $%s",
            address, len(transfers), swap_count, len(balances), total_balance,
        )
        return report

    def analyze_and_export(
        self,
        address: str,
        max_count: int,
        destination: Union[str, Path],
    ) -> WalletAnalysisReport:
        """Analyze `address` and write the report to `destination` (JSON, or CSV by suffix)."""
        report = self.analyze(address, max_count)
        self._exporter.export(report, destination)
        return report

    def close(self) -> None:
        if self._owns_executor:
            self._pipelines.shutdown(wait=False)

    @staticmethod
    def _result(future: "Future[T]", stage: str, address: str) -> T:
        try:
            return future.result()
        except AppError as e:
            raise AnalysisError(stage, address, e.message) from e
        except Exception as e:
            logger.exception("Unexpected failure fetching %s for %s", stage, address)
            raise AnalysisError(stage, address, str(e)) from e
