"""Asset transfer payloads (alchemy_getAssetTransfers)."""

from typing import Optional, Union

from pydantic import Field

from ethmonitor.domain.models.base import RpcError, UpstreamModel


class RawContract(UpstreamModel):
    value: Optional[str] = None
    address: Optional[str] = None
    decimal: Optional[str] = None


class TransferMetadata(UpstreamModel):
    block_timestamp: Optional[str] = None


class RawTransfer(UpstreamModel):
    """One transfer as reported upstream; values are left unparsed."""

    asset: Optional[str] = None
    from_address: Optional[str] = Field(default=None, alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    category: Optional[str] = None
    hash: Optional[str] = None
    # Numeric on the wire for most categories; kept as-is and parsed per transfer
    value: Optional[Union[str, int, float]] = None
    block_num: Optional[str] = None
    unique_id: Optional[str] = None
    token_id: Optional[str] = None
    raw_contract: Optional[RawContract] = None
    metadata: Optional[TransferMetadata] = None

    @property
    def block_timestamp(self) -> Optional[str]:
        return self.metadata.block_timestamp if self.metadata else None

    @property
    def raw_contract_address(self) -> Optional[str]:
        return self.raw_contract.address if self.raw_contract else None


class TransferResult(UpstreamModel):
    transfers: list[RawTransfer] = Field(default_factory=list)
    page_key: Optional[str] = None


class TransferResponse(UpstreamModel):
    """One page of transfers, or the assembled result of several pages."""

    jsonrpc: str = "2.0"
    id: int = 1
    result: Optional[TransferResult] = None
    error: Optional[RpcError] = None

    @property
    def transfers(self) -> list[RawTransfer]:
        return self.result.transfers if self.result else []

    @property
    def page_key(self) -> Optional[str]:
        return self.result.page_key if self.result else None
