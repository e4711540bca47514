"""Report export to JSON or CSV."""

import csv
import logging
from pathlib import Path
from typing import Union

from ethmonitor.core.exceptions import ExportError
from ethmonitor.domain.schemas import WalletAnalysisResponse
from ethmonitor.domain.views import WalletAnalysisReport

logger = logging.getLogger(__name__)

TRANSFER_COLUMNS = [
    "tx_hash",
    "timestamp",
    "from_address",
    "to_address",
    "asset",
    "value",
    "category",
    "raw_contract_address",
    "is_swap",
]

BALANCE_COLUMNS = [
    "symbol",
    "contract_address",
    "balance",
    "usd_value",
]


class ReportExporter:
    """
    Writes wallet analysis reports to disk.

    JSON holds the whole report. CSV writes the transfers to the given path
    and the balances next to it as `<stem>_balances.csv`.
    """

    def __init__(self, swap_detector=None):
        self._swap_detector = swap_detector

    def export(self, report: WalletAnalysisReport, path: Union[str, Path]) -> Path:
        """Export by file suffix: `.csv` for CSV, anything else for JSON."""
        file_path = Path(path)
        if file_path.suffix.lower() == ".csv":
            self.export_csv(report, file_path)
        else:
            self.export_json(report, file_path)
        return file_path

    def to_json(self, report: WalletAnalysisReport) -> str:
        return WalletAnalysisResponse.from_report(report).model_dump_json(indent=2)

    def export_json(self, report: WalletAnalysisReport, path: Union[str, Path]) -> None:
        file_path = Path(path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(self.to_json(report), encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Cannot write report to {file_path}: {e}") from e
        logger.info("Exported report for %s to %s", report.wallet_address, file_path)

    def export_csv(self, report: WalletAnalysisReport, path: Union[str, Path]) -> None:
        file_path = Path(path)
        balances_path = file_path.with_name(f"{file_path.stem}_balances.csv")
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", newline="", encoding="utf-8") as csvfile:
                writer = csv.DictWriter(csvfile, fieldnames=TRANSFER_COLUMNS)
                writer.writeheader()
                for txn in report.transfers:
                    writer.writerow({
                        "tx_hash": txn.tx_hash or "",
                        "timestamp": txn.timestamp.isoformat(),
                        "from_address": txn.from_address or "",
                        "to_address": txn.to_address or "",
                        "asset": txn.asset or "",
                        "value": str(txn.value),
                        "category": txn.category or "",
                        "raw_contract_address": txn.raw_contract_address or "",
                        "is_swap": self._is_swap(txn),
                    })

            with open(balances_path, "w", newline="", encoding="utf-8") as csvfile:
                writer = csv.DictWriter(csvfile, fieldnames=BALANCE_COLUMNS)
                writer.writeheader()
                for balance in report.balances:
                    writer.writerow({
                        "symbol": balance.symbol or "",
                        "contract_address": balance.contract_address,
                        "balance": str(balance.balance),
                        "usd_value": str(balance.usd_value),
                    })
        except OSError as e:
            raise ExportError(f"Cannot write report to {file_path}: {e}") from e
        logger.info("Exported report for %s to %s and %s", report.wallet_address, file_path, balances_path)

    def _is_swap(self, transfer) -> str:
        if self._swap_detector is None:
            return ""
        return "yes" if self._swap_detector.is_swap(transfer) else "no"
