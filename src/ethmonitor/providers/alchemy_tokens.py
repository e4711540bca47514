"""Alchemy token metadata provider."""

from ethmonitor.domain.models import TokenMetadataResponse
from ethmonitor.providers.alchemy_balances import DEFAULT_RPC_BASE_URL
from ethmonitor.providers.http_client import JsonHttpClient
from ethmonitor.providers.jsonrpc import node_url, rpc_call


class AlchemyTokenProvider:
    """Fetches decimals, name and symbol for an ERC-20 contract."""

    def __init__(
        self,
        http_client: JsonHttpClient,
        api_key: str,
        base_url: str = DEFAULT_RPC_BASE_URL,
    ):
        self._http = http_client
        self._url = node_url(base_url, api_key)

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        return rpc_call(
            self._http, self._url, "alchemy_getTokenMetadata", [token_address], TokenMetadataResponse
        )
