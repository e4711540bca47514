"""Balance payloads: ERC-20 token balances and the native coin balance."""

from typing import Optional

from pydantic import Field

from ethmonitor.domain.models.base import RpcError, UpstreamModel


class RawTokenBalance(UpstreamModel):
    """One contract's balance for the wallet, as a hex integer string."""

    contract_address: str
    token_balance: Optional[str] = None
    error: Optional[str] = None


class TokenBalancesResult(UpstreamModel):
    address: Optional[str] = None
    token_balances: list[RawTokenBalance] = Field(default_factory=list)


class TokenBalancesResponse(UpstreamModel):
    """Response of alchemy_getTokenBalances."""

    jsonrpc: str = "2.0"
    id: int = 1
    result: Optional[TokenBalancesResult] = None
    error: Optional[RpcError] = None

    @property
    def token_balances(self) -> list[RawTokenBalance]:
        return self.result.token_balances if self.result else []


class NativeBalanceResponse(UpstreamModel):
    """Response of eth_getBalance; `result` is wei as a hex string."""

    jsonrpc: str = "2.0"
    id: int = 1
    result: Optional[str] = None
    error: Optional[RpcError] = None
