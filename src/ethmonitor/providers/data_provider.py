"""Upstream data provider protocols."""

from typing import Optional, Protocol

from ethmonitor.domain.models import (
    NativeBalanceResponse,
    TokenBalancesResponse,
    TokenMetadataResponse,
    TokenPriceResponse,
    TransferResponse,
)


class BalancesProvider(Protocol):
    """Token and native-coin balances of a wallet."""

    def get_token_balances(self, address: str) -> TokenBalancesResponse:
        """Fetch every ERC-20 balance of the wallet (zero and error entries included)."""
        ...

    def get_native_balance(self, address: str) -> NativeBalanceResponse:
        """Fetch the native coin balance in wei, hex encoded."""
        ...


class PricesProvider(Protocol):
    """Token prices, looked up by contract address or by symbol."""

    def get_usd_price(self, token_address: str) -> TokenPriceResponse:
        ...

    def get_usd_price_by_symbol(self, symbol: str) -> TokenPriceResponse:
        ...


class TokenProvider(Protocol):
    """ERC-20 token metadata."""

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        ...


class TransfersProvider(Protocol):
    """
    Transfer history.

    get_transfers hides pagination: it returns up to `max_count` transfers
    in the shape of a single page.
    """

    def get_transfer_page(
        self,
        address: str,
        count: int,
        page_key: Optional[str] = None,
    ) -> TransferResponse:
        ...

    def get_transfers(self, address: str, max_count: int) -> TransferResponse:
        ...
