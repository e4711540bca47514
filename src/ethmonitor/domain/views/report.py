"""View models for wallet analysis outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Contract address reserved for the native coin; no ERC-20 contract can have it.
NATIVE_CONTRACT_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
NATIVE_SYMBOL = "ETH"
NATIVE_DECIMALS = 18


@dataclass(frozen=True)
class TokenBalance:
    """Holding of one asset, in native units and in USD."""

    symbol: Optional[str]
    contract_address: str
    balance: Decimal
    usd_value: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def is_native(self) -> bool:
        return self.contract_address == NATIVE_CONTRACT_ADDRESS


@dataclass(frozen=True)
class HistoricalTransfer:
    """A normalized, timestamped transfer."""

    tx_hash: Optional[str]
    timestamp: datetime
    from_address: Optional[str]
    to_address: Optional[str]
    asset: Optional[str]
    value: Decimal
    category: Optional[str]
    raw_contract_address: Optional[str] = None


@dataclass(frozen=True)
class WalletAnalysisReport:
    """
    Consolidated result of one wallet analysis.

    Built once per analyze() call and never modified afterwards.
    """

    wallet_address: str
    total_transaction_count: int
    total_volume_usd: Decimal
    estimated_swap_count: int
    balances: tuple[TokenBalance, ...] = ()
    transfers: tuple[HistoricalTransfer, ...] = ()
    total_balance_usd: Decimal = field(default_factory=lambda: Decimal("0"))
