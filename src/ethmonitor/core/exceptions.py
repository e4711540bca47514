"""Errors raised by the analyzer.

Every error carries a stable `code` for API clients and the HTTP status
the API answers with. Failures of a single balance or transfer record
are handled inside the pipelines; only the errors that end an operation
reach callers.
"""

from typing import Optional


class AppError(Exception):
    """Base class; `code` and `http_status` are what the API reports."""

    http_status = 400

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Bad caller input, such as a malformed wallet address."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class UpstreamError(AppError):
    """Raised when the upstream data provider fails or returns an unusable payload."""

    http_status = 502

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message, code="UPSTREAM_ERROR")


class EnrichmentError(AppError):
    """Raised when a single balance or transfer record cannot be converted."""

    def __init__(self, message: str):
        super().__init__(message, code="ENRICHMENT_ERROR")


class AnalysisError(AppError):
    """Raised when a wallet analysis cannot produce a report."""

    http_status = 502

    def __init__(self, stage: str, address: str, reason: str):
        self.stage = stage
        self.address = address
        super().__init__(
            f"Failed to fetch {stage} for {address}: {reason}",
            code="ANALYSIS_ERROR",
        )


class ExportError(AppError):
    """Raised when a report cannot be written to its destination."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message, code="EXPORT_ERROR")
