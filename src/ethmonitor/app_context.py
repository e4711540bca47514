"""Application context for in-process service management.

Wires providers, caches, executors and services for one set of API keys.
Used by the HTTP API and the CLI alike.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ethmonitor.cache import CacheLayer, CacheProfiles
from ethmonitor.config.settings import Settings, get_settings
from ethmonitor.export import ReportExporter
from ethmonitor.providers import (
    AlchemyBalancesProvider,
    AlchemyPricesProvider,
    AlchemyTokenProvider,
    AlchemyTransfersProvider,
    BalancesProvider,
    JsonHttpClient,
    PricesProvider,
    RequestsHttpClient,
    TokenProvider,
    TransfersProvider,
)
from ethmonitor.services import (
    KNOWN_DEX_CONTRACTS,
    BalanceService,
    CachedApiService,
    SwapDetector,
    TransferService,
    WalletAnalyzer,
)

logger = logging.getLogger(__name__)


class AppContext:
    """
    Application context providing in-process access to all services.

    Services are created lazily on first access and shared afterwards.
    Providers may be injected (tests do); otherwise Alchemy providers are
    built from `settings` on a shared HTTP client.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[JsonHttpClient] = None,
        balances_provider: Optional[BalancesProvider] = None,
        prices_provider: Optional[PricesProvider] = None,
        token_provider: Optional[TokenProvider] = None,
        transfers_provider: Optional[TransfersProvider] = None,
    ):
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._balances_provider = balances_provider
        self._prices_provider = prices_provider
        self._token_provider = token_provider
        self._transfers_provider = transfers_provider
        self._profiles = CacheProfiles.from_settings(self._settings)
        self._lock = threading.RLock()
        self._closed = False

        # Service instances (lazy initialized)
        self._api_service: Optional[CachedApiService] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pipeline_executor: Optional[ThreadPoolExecutor] = None
        self._valued_balances_cache: Optional[CacheLayer] = None
        self._balance_service: Optional[BalanceService] = None
        self._transfer_service: Optional[TransferService] = None
        self._swap_detector: Optional[SwapDetector] = None
        self._exporter: Optional[ReportExporter] = None
        self._analyzer: Optional[WalletAnalyzer] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _get_http_client(self) -> JsonHttpClient:
        if self._http_client is None:
            self._http_client = RequestsHttpClient(
                timeout_seconds=self._settings.http_timeout_seconds,
                secrets=self._settings.resolve_api_keys(),
            )
        return self._http_client

    def _build_api_service(self) -> CachedApiService:
        settings = self._settings
        balances_key, prices_key, tokens_key, transfers_key = settings.resolve_api_keys()

        balances = self._balances_provider
        if balances is None:
            balances = AlchemyBalancesProvider(
                self._get_http_client(), balances_key, base_url=settings.rpc_base_url
            )
        prices = self._prices_provider
        if prices is None:
            prices = AlchemyPricesProvider(
                self._get_http_client(),
                prices_key,
                network=settings.network,
                base_url=settings.prices_base_url,
            )
        tokens = self._token_provider
        if tokens is None:
            tokens = AlchemyTokenProvider(
                self._get_http_client(), tokens_key, base_url=settings.rpc_base_url
            )
        transfers = self._transfers_provider
        if transfers is None:
            transfers = AlchemyTransfersProvider(
                self._get_http_client(), transfers_key, base_url=settings.rpc_base_url
            )

        return CachedApiService.from_profiles(
            balances_provider=balances,
            prices_provider=prices,
            token_provider=tokens,
            transfers_provider=transfers,
            profiles=self._profiles,
        )

    # Service accessors
    @property
    def api_service(self) -> CachedApiService:
        """Get the cached data façade."""
        with self._lock:
            if self._api_service is None:
                self._api_service = self._build_api_service()
            return self._api_service

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Get the bounded executor shared by the per-item enrichment tasks."""
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._settings.max_workers,
                    thread_name_prefix="enrich",
                )
            return self._executor

    @property
    def pipeline_executor(self) -> ThreadPoolExecutor:
        """Get the executor running the two pipelines side by side."""
        with self._lock:
            if self._pipeline_executor is None:
                self._pipeline_executor = ThreadPoolExecutor(
                    max_workers=2, thread_name_prefix="pipeline"
                )
            return self._pipeline_executor

    @property
    def balance_service(self) -> BalanceService:
        with self._lock:
            if self._balance_service is None:
                self._valued_balances_cache = self._profiles.valued_balances.build(
                    "valued_balances"
                )
                self._balance_service = BalanceService(
                    api_service=self.api_service,
                    executor=self.executor,
                    task_timeout_seconds=self._settings.task_timeout_seconds,
                    valued_balances_cache=self._valued_balances_cache,
                )
            return self._balance_service

    @property
    def transfer_service(self) -> TransferService:
        with self._lock:
            if self._transfer_service is None:
                self._transfer_service = TransferService(
                    api_service=self.api_service,
                    executor=self.executor,
                    task_timeout_seconds=self._settings.task_timeout_seconds,
                )
            return self._transfer_service

    @property
    def swap_detector(self) -> SwapDetector:
        with self._lock:
            if self._swap_detector is None:
                self._swap_detector = SwapDetector(
                    KNOWN_DEX_CONTRACTS.union(self._settings.extra_dex_contracts)
                )
            return self._swap_detector

    @property
    def exporter(self) -> ReportExporter:
        with self._lock:
            if self._exporter is None:
                self._exporter = ReportExporter(self.swap_detector)
            return self._exporter

    @property
    def analyzer(self) -> WalletAnalyzer:
        """Get the WalletAnalyzer instance."""
        with self._lock:
            if self._analyzer is None:
                self._analyzer = WalletAnalyzer(
                    transfer_service=self.transfer_service,
                    balance_service=self.balance_service,
                    swap_detector=self.swap_detector,
                    pipeline_executor=self.pipeline_executor,
                    exporter=self.exporter,
                )
            return self._analyzer

    def clear_caches(self) -> None:
        """Drop every cached upstream response and valued balance list."""
        with self._lock:
            if self._api_service is not None:
                self._api_service.clear_caches()
            if self._valued_balances_cache is not None:
                self._valued_balances_cache.clear()

    def close(self) -> None:
        """Shut down executors and release the HTTP session."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for executor in (self._pipeline_executor, self._executor):
                if executor is not None:
                    executor.shutdown(wait=False, cancel_futures=True)
            close_http = getattr(self._http_client, "close", None)
            if close_http is not None:
                close_http()


class ContextRegistry:
    """
    One AppContext per set of API keys.

    Requests carrying the same keys share caches and executors.
    """

    def __init__(self, factory=AppContext):
        self._factory = factory
        self._contexts: dict[tuple[str, ...], AppContext] = {}
        self._lock = threading.Lock()

    def get(self, settings: Optional[Settings] = None) -> AppContext:
        settings = settings or get_settings()
        key = settings.resolve_api_keys()
        with self._lock:
            context = self._contexts.get(key)
            if context is None or context.is_closed:
                context = self._factory(settings)
                self._contexts[key] = context
                logger.debug("Created analysis context (%d active)", len(self._contexts))
            return context

    def clear_caches(self) -> None:
        with self._lock:
            contexts = list(self._contexts.values())
        for context in contexts:
            context.clear_caches()

    def close_all(self) -> None:
        with self._lock:
            contexts = list(self._contexts.values())
            self._contexts.clear()
        for context in contexts:
            context.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)
