"""Transfer enrichment: raw paged transfers to timestamped history records."""

import logging
from concurrent.futures import Executor

from ethmonitor.core.exceptions import EnrichmentError
from ethmonitor.core.numeric import to_decimal
from ethmonitor.core.timeutil import parse_block_timestamp
from ethmonitor.domain.models import RawTransfer
from ethmonitor.domain.views import HistoricalTransfer
from ethmonitor.services.api_service import CachedApiService
from ethmonitor.services.task_runner import run_batch

logger = logging.getLogger(__name__)


def to_historical_transfer(raw: RawTransfer) -> HistoricalTransfer:
    """
    Normalize one transfer.

    A missing value counts as 0. A missing or unparsable block timestamp, or
    an unparsable value, raises EnrichmentError.
    """
    try:
        value = to_decimal(raw.value)
    except ValueError as e:
        raise EnrichmentError(f"Transfer {raw.hash}: {e}") from e
    try:
        timestamp = parse_block_timestamp(raw.block_timestamp)
    except ValueError as e:
        raise EnrichmentError(f"Transfer {raw.hash}: {e}") from e

    return HistoricalTransfer(
        tx_hash=raw.hash,
        timestamp=timestamp,
        from_address=raw.from_address,
        to_address=raw.to_address,
        asset=raw.asset,
        value=value,
        category=raw.category,
        raw_contract_address=raw.raw_contract_address,
    )


class TransferService:
    """Fetches a wallet's transfer history and converts it record by record."""

    def __init__(
        self,
        api_service: CachedApiService,
        executor: Executor,
        task_timeout_seconds: float = 15.0,
    ):
        self._api = api_service
        self._executor = executor
        self._task_timeout = task_timeout_seconds

    def get_historical_transfers(self, address: str, max_count: int) -> list[HistoricalTransfer]:
        """
        Return up to `max_count` transfers in upstream order.

        Records that fail conversion are logged and excluded; they are not retried.
        """
        response = self._api.get_transfers(address, max_count)
        raw_transfers = response.transfers

        converted = run_batch(
            self._executor,
            to_historical_transfer,
            raw_transfers,
            self._task_timeout,
            label=f"transfer task for {address}",
        )
        result = [transfer for transfer in converted if transfer is not None]
        if len(result) < len(raw_transfers):
            logger.warning(
                "Converted %d of %d transfers for %s",
                len(result), len(raw_transfers), address,
            )
        return result
