"""Balance enrichment: raw token balances to USD-valued holdings."""

import logging
from concurrent.futures import Executor, TimeoutError as FuturesTimeoutError
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional

from ethmonitor.cache import CacheLayer
from ethmonitor.core.exceptions import EnrichmentError, UpstreamError
from ethmonitor.core.numeric import ZERO, parse_hex_quantity, round_usd, shift_decimals
from ethmonitor.domain.models import RawTokenBalance
from ethmonitor.domain.views import (
    NATIVE_CONTRACT_ADDRESS,
    NATIVE_DECIMALS,
    NATIVE_SYMBOL,
    TokenBalance,
)
from ethmonitor.services.api_service import CachedApiService
from ethmonitor.services.task_runner import run_batch, submit_tracked

logger = logging.getLogger(__name__)

DEFAULT_TASK_TIMEOUT_SECONDS = 15.0


class HeldToken(NamedTuple):
    """A contract the wallet holds a nonzero amount of."""

    contract_address: str
    raw_amount: int


def select_held_tokens(balances: Iterable[RawTokenBalance]) -> list[HeldToken]:
    """
    Keep balances worth enriching.

    Drops entries with an error, a missing or non-hex balance, or a zero balance.
    """
    held: list[HeldToken] = []
    for entry in balances:
        if entry.error is not None:
            continue
        raw_amount = parse_hex_quantity(entry.token_balance)
        if not raw_amount:
            continue
        held.append(HeldToken(entry.contract_address, raw_amount))
    return held


def usd_value(amount: Decimal, usd_price: Optional[Decimal]) -> Decimal:
    """Value `amount` at `usd_price`; no quote (or a nonsensical negative one) values it at 0."""
    if usd_price is None or usd_price < ZERO:
        usd_price = ZERO
    return round_usd(usd_price * amount)


class BalanceService:
    """
    Values every held ERC-20 token plus the native coin in USD.

    Tokens are enriched concurrently on the shared executor. A token whose
    metadata or price fetch fails, or which exceeds the per-task timeout, is
    logged and left out; it never fails the wallet. Failing to fetch the
    balance list itself, or the native balance (including a native fetch still
    unfinished a task timeout after the tokens are done), does propagate.
    """

    def __init__(
        self,
        api_service: CachedApiService,
        executor: Executor,
        task_timeout_seconds: float = DEFAULT_TASK_TIMEOUT_SECONDS,
        valued_balances_cache: Optional[CacheLayer] = None,
    ):
        self._api = api_service
        self._executor = executor
        self._task_timeout = task_timeout_seconds
        self._valued_cache = valued_balances_cache

    def get_token_balances_with_usd(self, address: str) -> list[TokenBalance]:
        """
        Return held token balances (input order) followed by the native coin entry.
        """
        if self._valued_cache is None:
            return self._collect_balances(address)
        cached = self._valued_cache.get_or_compute(
            address.lower(), lambda _: tuple(self._collect_balances(address))
        )
        return list(cached)

    def get_native_balance_with_usd(self, address: str) -> TokenBalance:
        """Value the wallet's native coin balance (18 decimals, priced by symbol)."""
        response = self._api.get_native_balance(address)
        raw_amount = parse_hex_quantity(response.result)
        if raw_amount is None:
            raise UpstreamError(f"Malformed native balance for {address}: {response.result!r}")

        balance = shift_decimals(raw_amount, NATIVE_DECIMALS)
        price = self._api.get_usd_price_by_symbol(NATIVE_SYMBOL).usd_quote()
        return TokenBalance(
            symbol=NATIVE_SYMBOL,
            contract_address=NATIVE_CONTRACT_ADDRESS,
            balance=balance,
            usd_value=usd_value(balance, price),
        )

    def value_token(self, token: HeldToken) -> TokenBalance:
        """Enrich one held token with metadata and its USD value."""
        metadata = self._api.get_token_metadata(token.contract_address).result
        if metadata is None or metadata.decimals is None:
            raise EnrichmentError(f"No decimals for token {token.contract_address}")

        balance = shift_decimals(token.raw_amount, metadata.decimals)
        price = self._api.get_usd_price(token.contract_address).usd_quote()
        return TokenBalance(
            symbol=metadata.symbol,
            contract_address=token.contract_address,
            balance=balance,
            usd_value=usd_value(balance, price),
        )

    def _collect_balances(self, address: str) -> list[TokenBalance]:
        response = self._api.get_token_balances(address)
        held = select_held_tokens(response.token_balances)
        logger.debug("%s holds %d nonzero token balances", address, len(held))

        native_future = submit_tracked(self._executor, self.get_native_balance_with_usd, address)
        valued = run_batch(
            self._executor,
            self.value_token,
            held,
            self._task_timeout,
            label=f"balance task for {address}",
        )
        result = [balance for balance in valued if balance is not None]
        if len(result) < len(held):
            logger.warning(
                "Valued %d of %d tokens for %s; the rest were dropped",
                len(result), len(held), address,
            )

        try:
            native = native_future.result(timeout=self._task_timeout)
        except FuturesTimeoutError as e:
            native_future.cancel()
            raise UpstreamError(f"Timed out fetching native balance for {address}") from e
        result.append(native)
        return result
