"""Alchemy transfers provider with cursor-based pagination."""

import logging
from typing import Optional

from ethmonitor.domain.models import RawTransfer, TransferResponse, TransferResult
from ethmonitor.providers.alchemy_balances import DEFAULT_RPC_BASE_URL
from ethmonitor.providers.http_client import JsonHttpClient
from ethmonitor.providers.jsonrpc import node_url, rpc_call

logger = logging.getLogger(__name__)

PAGE_SIZE = 100

TRANSFER_CATEGORIES = ["external", "erc20", "internal", "erc721", "erc1155", "specialnft"]


class AlchemyTransfersProvider:
    """Fetches transfers received by an address, one page or many."""

    def __init__(
        self,
        http_client: JsonHttpClient,
        api_key: str,
        base_url: str = DEFAULT_RPC_BASE_URL,
        page_size: int = PAGE_SIZE,
    ):
        self._http = http_client
        self._url = node_url(base_url, api_key)
        self._page_size = page_size

    def get_transfer_page(
        self,
        address: str,
        count: int,
        page_key: Optional[str] = None,
    ) -> TransferResponse:
        """Request a single page of at most `count` transfers."""
        params = {
            "fromBlock": "0x0",
            "toBlock": "latest",
            "toAddress": address.lower(),
            "category": TRANSFER_CATEGORIES,
            "withMetadata": True,
            "excludeZeroValue": True,
            "maxCount": hex(count),
        }
        if page_key:
            params["pageKey"] = page_key
        return rpc_call(self._http, self._url, "alchemy_getAssetTransfers", [params], TransferResponse)

    def get_transfers(self, address: str, max_count: int) -> TransferResponse:
        """
        Collect up to `max_count` transfers across pages.

        Each request asks for min(page_size, max_count - collected). Stops when
        the provider returns no cursor, an empty page, or enough transfers have
        been collected. The result is truncated to `max_count`.
        """
        collected: list[RawTransfer] = []
        page_key: Optional[str] = None
        pages = 0

        while len(collected) < max_count:
            count = min(self._page_size, max_count - len(collected))
            page = self.get_transfer_page(address, count, page_key)
            pages += 1

            if not page.transfers:
                break
            collected.extend(page.transfers)

            page_key = page.page_key
            if not page_key:
                break

        logger.debug("Fetched %d transfers for %s in %d page(s)", len(collected), address, pages)
        return TransferResponse(result=TransferResult(transfers=collected[:max_count]))
