"""Alchemy balances provider (alchemy_getTokenBalances, eth_getBalance)."""

from ethmonitor.domain.models import NativeBalanceResponse, TokenBalancesResponse
from ethmonitor.providers.http_client import JsonHttpClient
from ethmonitor.providers.jsonrpc import node_url, rpc_call

DEFAULT_RPC_BASE_URL = "https://eth-mainnet.g.alchemy.com/v2"


class AlchemyBalancesProvider:
    """Fetches ERC-20 and native coin balances for a wallet."""

    def __init__(
        self,
        http_client: JsonHttpClient,
        api_key: str,
        base_url: str = DEFAULT_RPC_BASE_URL,
    ):
        self._http = http_client
        self._url = node_url(base_url, api_key)

    def get_token_balances(self, address: str) -> TokenBalancesResponse:
        return rpc_call(
            self._http, self._url, "alchemy_getTokenBalances", [address], TokenBalancesResponse
        )

    def get_native_balance(self, address: str) -> NativeBalanceResponse:
        return rpc_call(
            self._http, self._url, "eth_getBalance", [address, "latest"], NativeBalanceResponse
        )
