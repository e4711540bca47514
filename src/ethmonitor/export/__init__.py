"""Report export."""

from ethmonitor.export.exporter import ReportExporter, TRANSFER_COLUMNS, BALANCE_COLUMNS

__all__ = [
    "ReportExporter",
    "TRANSFER_COLUMNS",
    "BALANCE_COLUMNS",
]
