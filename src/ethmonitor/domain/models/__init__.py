"""Raw upstream records."""

from ethmonitor.domain.models.base import RpcError, UpstreamModel
from ethmonitor.domain.models.balances import (
    RawTokenBalance,
    TokenBalancesResult,
    TokenBalancesResponse,
    NativeBalanceResponse,
)
from ethmonitor.domain.models.tokens import TokenMetadata, TokenMetadataResponse
from ethmonitor.domain.models.prices import PriceQuote, TokenPriceEntry, TokenPriceResponse
from ethmonitor.domain.models.transfers import (
    RawContract,
    TransferMetadata,
    RawTransfer,
    TransferResult,
    TransferResponse,
)

__all__ = [
    "RpcError",
    "UpstreamModel",
    "RawTokenBalance",
    "TokenBalancesResult",
    "TokenBalancesResponse",
    "NativeBalanceResponse",
    "TokenMetadata",
    "TokenMetadataResponse",
    "PriceQuote",
    "TokenPriceEntry",
    "TokenPriceResponse",
    "RawContract",
    "TransferMetadata",
    "RawTransfer",
    "TransferResult",
    "TransferResponse",
]
