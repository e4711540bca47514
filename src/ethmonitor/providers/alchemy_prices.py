"""Alchemy prices provider (tokens/by-address and tokens/by-symbol)."""

import logging

from ethmonitor.domain.models import TokenPriceResponse
from ethmonitor.providers.http_client import JsonHttpClient

logger = logging.getLogger(__name__)

DEFAULT_PRICES_BASE_URL = "https://api.g.alchemy.com/prices/v1"


class AlchemyPricesProvider:
    """
    Fetches token prices.

    Entries the API could not price carry an `error` and no quotes; callers
    see that as "no usd quote", not as a failure.
    """

    def __init__(
        self,
        http_client: JsonHttpClient,
        api_key: str,
        network: str = "eth-mainnet",
        base_url: str = DEFAULT_PRICES_BASE_URL,
    ):
        self._http = http_client
        self._network = network
        root = f"{base_url.rstrip('/')}/{api_key}/tokens"
        self._by_address_url = f"{root}/by-address"
        self._by_symbol_url = f"{root}/by-symbol"

    def get_usd_price(self, token_address: str) -> TokenPriceResponse:
        body = {"addresses": [{"network": self._network, "address": token_address}]}
        response = self._http.post(self._by_address_url, body, TokenPriceResponse)
        logger.debug("Price response for address %s: %d entries", token_address, len(response.data))
        return response

    def get_usd_price_by_symbol(self, symbol: str) -> TokenPriceResponse:
        response = self._http.get(self._by_symbol_url, TokenPriceResponse, params={"symbols": symbol})
        logger.debug("Price response for symbol %s: %d entries", symbol, len(response.data))
        return response
