"""Swap classification by known DEX contract addresses."""

from typing import Iterable, Optional

from ethmonitor.domain.views import HistoricalTransfer

# Known DEX router or factory contracts
KNOWN_DEX_CONTRACTS = frozenset({
    "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f",  # Uniswap V2 Factory
    "0x7a250d5630b4cf539739df2c5dacabf31d1c8ed8",  # Uniswap V2 Router
    "0xe592427a0aece92de3edee1f18e0157c05861564",  # Uniswap V3 Router
    "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45",  # Uniswap V3 SwapRouter02
    "0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f",  # SushiSwap Router
    "0x1111111254eeb25477b68fb85ed929f73a960582",  # 1inch
    "0xdef1c0ded9bec7f1a1670819833240f027b25eff",  # 0x Exchange Proxy
})


class SwapDetector:
    """Flags a transfer as a swap when it touches a known DEX contract."""

    def __init__(self, known_contracts: Iterable[str] = KNOWN_DEX_CONTRACTS):
        self._known = frozenset(address.lower() for address in known_contracts)

    @property
    def known_contracts(self) -> frozenset[str]:
        return self._known

    def is_swap(self, transfer: Optional[HistoricalTransfer]) -> bool:
        """True iff the raw contract, sender or recipient is a known DEX contract."""
        if transfer is None:
            return False
        return any(
            self._is_known(address)
            for address in (
                transfer.raw_contract_address,
                transfer.from_address,
                transfer.to_address,
            )
        )

    def count_swaps(self, transfers: Iterable[HistoricalTransfer]) -> int:
        return sum(1 for transfer in transfers if self.is_swap(transfer))

    def _is_known(self, address: Optional[str]) -> bool:
        return address is not None and address.lower() in self._known
