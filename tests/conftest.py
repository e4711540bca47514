"""
Pytest configuration and fixtures for wallet analyzer tests.

This module provides:
- Builders for upstream payloads (balances, metadata, prices, transfers)
- In-memory, counting, failing and slow fake providers
- A fake monotonic clock for cache expiry
- Façade, service and analyzer fixtures
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Iterable, Optional

import pytest

from ethmonitor.cache import CacheProfiles
from ethmonitor.config.settings import Settings, reset_settings, set_settings
from ethmonitor.core.exceptions import UpstreamError
from ethmonitor.domain.models import (
    NativeBalanceResponse,
    PriceQuote,
    RawContract,
    RawTokenBalance,
    RawTransfer,
    TokenBalancesResponse,
    TokenBalancesResult,
    TokenMetadata,
    TokenMetadataResponse,
    TokenPriceEntry,
    TokenPriceResponse,
    TransferMetadata,
    TransferResponse,
    TransferResult,
)
from ethmonitor.services import (
    BalanceService,
    CachedApiService,
    SwapDetector,
    TransferService,
    WalletAnalyzer,
)


WALLET = "0x1111111111111111111111111111111111111111"
OTHER_WALLET = "0x2222222222222222222222222222222222222222"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
LINK = "0x514910771af9ca656af840dff83e8264ecf986ca"
UNISWAP_V2_ROUTER = "0x7a250d5630b4cf539739df2c5dacabf31d1c8ed8"


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================


def token_balances_response(
    address: str, balances: Iterable[tuple[str, Optional[str]]]
) -> TokenBalancesResponse:
    """Build a balances response from (contract, hex balance) pairs."""
    return TokenBalancesResponse(
        result=TokenBalancesResult(
            address=address,
            token_balances=[
                RawTokenBalance(contract_address=contract, token_balance=raw)
                for contract, raw in balances
            ],
        )
    )


def price_response(usd: Optional[str], currency: str = "usd") -> TokenPriceResponse:
    """Build a price response with one quote, or no quotes when `usd` is None."""
    prices = [] if usd is None else [PriceQuote(currency=currency, value=Decimal(usd))]
    return TokenPriceResponse(data=[TokenPriceEntry(prices=prices)])


def metadata_response(symbol: str, decimals: Optional[int]) -> TokenMetadataResponse:
    return TokenMetadataResponse(
        result=TokenMetadata(decimals=decimals, name=symbol, symbol=symbol)
    )


def raw_transfer(
    tx_hash: str,
    value="1",
    from_address: str = OTHER_WALLET,
    to_address: str = WALLET,
    contract: Optional[str] = None,
    timestamp: Optional[str] = "2024-06-15T14:30:00.000Z",
    asset: str = "ETH",
    category: str = "external",
) -> RawTransfer:
    return RawTransfer(
        asset=asset,
        from_address=from_address,
        to_address=to_address,
        category=category,
        hash=tx_hash,
        value=value,
        raw_contract=RawContract(address=contract),
        metadata=TransferMetadata(block_timestamp=timestamp),
    )


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


class CountingMixin:
    """Counts calls per (method, key) across threads."""

    def __init__(self):
        self.calls: dict[tuple[str, str], int] = {}
        self._calls_lock = threading.Lock()

    def _count(self, method: str, key: str) -> None:
        with self._calls_lock:
            self.calls[(method, key)] = self.calls.get((method, key), 0) + 1

    def call_count(self, method: Optional[str] = None) -> int:
        with self._calls_lock:
            return sum(n for (m, _), n in self.calls.items() if method is None or m == method)


class InMemoryBalancesProvider(CountingMixin):
    """Token and native balances from dicts keyed by lowercase address."""

    def __init__(
        self,
        token_balances: Optional[dict[str, list[tuple[str, Optional[str]]]]] = None,
        native_balances: Optional[dict[str, str]] = None,
    ):
        super().__init__()
        self.token_balances = token_balances or {}
        self.native_balances = native_balances or {}

    def get_token_balances(self, address: str) -> TokenBalancesResponse:
        self._count("token_balances", address.lower())
        return token_balances_response(address, self.token_balances.get(address.lower(), []))

    def get_native_balance(self, address: str) -> NativeBalanceResponse:
        self._count("native_balance", address.lower())
        return NativeBalanceResponse(result=self.native_balances.get(address.lower(), "0x0"))


class InMemoryPricesProvider(CountingMixin):
    """USD prices by lowercase contract address and by uppercase symbol."""

    def __init__(
        self,
        by_address: Optional[dict[str, Optional[str]]] = None,
        by_symbol: Optional[dict[str, Optional[str]]] = None,
        failing: Iterable[str] = (),
    ):
        super().__init__()
        self.by_address = by_address or {}
        self.by_symbol = by_symbol or {}
        self.failing = {key.lower() for key in failing}

    def get_usd_price(self, token_address: str) -> TokenPriceResponse:
        self._count("usd_price", token_address.lower())
        if token_address.lower() in self.failing:
            raise UpstreamError(f"price lookup failed for {token_address}")
        return price_response(self.by_address.get(token_address.lower()))

    def get_usd_price_by_symbol(self, symbol: str) -> TokenPriceResponse:
        self._count("usd_price_by_symbol", symbol.upper())
        return price_response(self.by_symbol.get(symbol.upper()))


class InMemoryTokenProvider(CountingMixin):
    """Metadata by lowercase contract address; unknown contracts raise."""

    def __init__(self, metadata: Optional[dict[str, tuple[str, Optional[int]]]] = None):
        super().__init__()
        self.metadata = metadata or {}

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        self._count("token_metadata", token_address.lower())
        if token_address.lower() not in self.metadata:
            raise UpstreamError(f"unknown token {token_address}")
        symbol, decimals = self.metadata[token_address.lower()]
        return metadata_response(symbol, decimals)


class SlowTokenProvider(InMemoryTokenProvider):
    """Blocks metadata lookups for `slow` contracts until `release` is set."""

    def __init__(self, metadata, slow: Iterable[str]):
        super().__init__(metadata)
        self.slow = {contract.lower() for contract in slow}
        self.release = threading.Event()

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        if token_address.lower() in self.slow:
            self.release.wait(timeout=5)
        return super().get_token_metadata(token_address)


class DelayedTokenProvider(InMemoryTokenProvider):
    """Every metadata lookup takes `delay` seconds."""

    def __init__(self, metadata, delay: float):
        super().__init__(metadata)
        self.delay = delay

    def get_token_metadata(self, token_address: str) -> TokenMetadataResponse:
        time.sleep(self.delay)
        return super().get_token_metadata(token_address)


class HangingNativeBalancesProvider(InMemoryBalancesProvider):
    """Native balance lookups block until `release` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.release = threading.Event()

    def get_native_balance(self, address: str) -> NativeBalanceResponse:
        self.release.wait(timeout=5)
        return super().get_native_balance(address)


class InMemoryTransfersProvider(CountingMixin):
    """Serves a fixed transfer list, truncated to the requested count."""

    def __init__(self, transfers: Optional[list[RawTransfer]] = None):
        super().__init__()
        self.transfers = transfers or []

    def get_transfer_page(self, address: str, count: int, page_key: Optional[str] = None):
        self._count("transfer_page", address.lower())
        return TransferResponse(result=TransferResult(transfers=self.transfers[:count]))

    def get_transfers(self, address: str, max_count: int) -> TransferResponse:
        self._count("transfers", address.lower())
        return TransferResponse(result=TransferResult(transfers=self.transfers[:max_count]))


class FailingProvider:
    """Every upstream call fails."""

    def __init__(self, message: str = "upstream unavailable"):
        self.message = message

    def _fail(self, *args, **kwargs):
        raise UpstreamError(self.message, status_code=503)

    get_token_balances = _fail
    get_native_balance = _fail
    get_usd_price = _fail
    get_usd_price_by_symbol = _fail
    get_token_metadata = _fail
    get_transfer_page = _fail
    get_transfers = _fail


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings():
    """Give each test default settings without reading the environment's keys."""
    set_settings(Settings(_env_file=None, alchemy_api_key="test-key"))
    yield
    reset_settings()


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================


@pytest.fixture
def balances_provider() -> InMemoryBalancesProvider:
    """Wallet holding 1 USDC, 2 DAI, a zero LINK balance and 1.5 ETH."""
    return InMemoryBalancesProvider(
        token_balances={
            WALLET: [
                (USDC, "0xf4240"),
                (DAI, hex(2 * 10**18)),
                (LINK, "0x0"),
            ],
        },
        native_balances={WALLET: hex(15 * 10**17)},
    )


@pytest.fixture
def prices_provider() -> InMemoryPricesProvider:
    return InMemoryPricesProvider(
        by_address={USDC: "1.0", DAI: "0.999"},
        by_symbol={"ETH": "3000"},
    )


@pytest.fixture
def token_provider() -> InMemoryTokenProvider:
    return InMemoryTokenProvider(
        metadata={USDC: ("USDC", 6), DAI: ("DAI", 18), LINK: ("LINK", 18)}
    )


@pytest.fixture
def transfers_provider() -> InMemoryTransfersProvider:
    """Three incoming transfers, one of them routed through Uniswap V2."""
    return InMemoryTransfersProvider([
        raw_transfer("0xaaa", value=1.5),
        raw_transfer("0xbbb", value="2.25", from_address=UNISWAP_V2_ROUTER),
        raw_transfer("0xccc", value=10, asset="USDC", contract=USDC, category="erc20"),
    ])


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=8, thread_name_prefix="test-enrich")
    yield pool
    pool.shutdown(wait=False, cancel_futures=True)


@pytest.fixture
def api_service(
    balances_provider, prices_provider, token_provider, transfers_provider
) -> CachedApiService:
    return CachedApiService.from_profiles(
        balances_provider=balances_provider,
        prices_provider=prices_provider,
        token_provider=token_provider,
        transfers_provider=transfers_provider,
        profiles=CacheProfiles(),
    )


@pytest.fixture
def balance_service(api_service, executor) -> BalanceService:
    return BalanceService(api_service, executor, task_timeout_seconds=2.0)


@pytest.fixture
def transfer_service(api_service, executor) -> TransferService:
    return TransferService(api_service, executor, task_timeout_seconds=2.0)


@pytest.fixture
def wallet_analyzer(transfer_service, balance_service):
    analyzer = WalletAnalyzer(
        transfer_service=transfer_service,
        balance_service=balance_service,
        swap_detector=SwapDetector(),
    )
    yield analyzer
    analyzer.close()
