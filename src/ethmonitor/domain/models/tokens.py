"""Token metadata payload."""

from typing import Optional

from pydantic import Field

from ethmonitor.domain.models.base import RpcError, UpstreamModel


class TokenMetadata(UpstreamModel):
    """Decimals, name and symbol of an ERC-20 contract."""

    decimals: Optional[int] = Field(default=None, ge=0)
    name: Optional[str] = None
    symbol: Optional[str] = None
    logo: Optional[str] = None


class TokenMetadataResponse(UpstreamModel):
    """Response of alchemy_getTokenMetadata."""

    jsonrpc: str = "2.0"
    id: int = 1
    result: Optional[TokenMetadata] = None
    error: Optional[RpcError] = None
