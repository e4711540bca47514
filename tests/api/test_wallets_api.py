"""
API tests for the wallet endpoints.

Tests cover:
- Full analysis response
- Per-pipeline endpoints
- Address and count validation
- Upstream failures mapped to 502
- Cache clearing
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ethmonitor.app_context import AppContext, ContextRegistry
from ethmonitor.main import app

from tests.conftest import WALLET, FailingProvider


@pytest.fixture
def registry(balances_provider, prices_provider, token_provider, transfers_provider):
    def factory(settings):
        return AppContext(
            settings,
            balances_provider=balances_provider,
            prices_provider=prices_provider,
            token_provider=token_provider,
            transfers_provider=transfers_provider,
        )

    registry = ContextRegistry(factory=factory)
    previous = app.state.contexts
    app.state.contexts = registry
    yield registry
    registry.close_all()
    app.state.contexts = previous


@pytest.fixture
def client(registry) -> TestClient:
    return TestClient(app)


@pytest.fixture
def failing_client():
    def factory(settings):
        failing = FailingProvider("provider offline")
        return AppContext(
            settings,
            balances_provider=failing,
            prices_provider=failing,
            token_provider=failing,
            transfers_provider=failing,
        )

    registry = ContextRegistry(factory=factory)
    previous = app.state.contexts
    app.state.contexts = registry
    yield TestClient(app)
    registry.close_all()
    app.state.contexts = previous


# =============================================================================
# BASIC ENDPOINTS
# =============================================================================


class TestInfoEndpoints:
    """Tests for health and root endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        body = client.get("/").json()

        assert body["docs"] == "/docs"
        assert "version" in body


# =============================================================================
# ANALYSIS ENDPOINT
# =============================================================================


class TestAnalysisEndpoint:
    """Tests for GET /wallets/{address}/analysis."""

    def test_returns_full_report(self, client):
        """
        GIVEN the standard fake wallet
        WHEN its analysis is requested
        THEN the response carries counts, totals, balances and transfers
        """
        response = client.get(f"/wallets/{WALLET}/analysis", params={"max_transfers": 10})

        assert response.status_code == 200
        body = response.json()
        assert body["wallet_address"] == WALLET
        assert body["total_transaction_count"] == 3
        assert body["estimated_swap_count"] == 1
        assert Decimal(body["total_volume_usd"]) == Decimal("13.75")
        assert Decimal(body["total_balance_usd"]) == Decimal("4502.998")
        assert [b["symbol"] for b in body["balances"]] == ["USDC", "DAI", "ETH"]
        assert len(body["transfers"]) == 3

    def test_default_max_transfers(self, client):
        response = client.get(f"/wallets/{WALLET}/analysis")

        assert response.status_code == 200
        assert response.json()["total_transaction_count"] == 3

    def test_invalid_address_is_400(self, client):
        response = client.get("/wallets/0x1234/analysis")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("count", [0, 10_001])
    def test_out_of_range_count_is_rejected(self, client, count):
        response = client.get(f"/wallets/{WALLET}/analysis", params={"max_transfers": count})

        assert response.status_code == 422

    def test_upstream_failure_is_502(self, failing_client):
        response = failing_client.get(f"/wallets/{WALLET}/analysis")

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "ANALYSIS_ERROR"
        assert "provider offline" in body["message"]


# =============================================================================
# PIPELINE ENDPOINTS
# =============================================================================


class TestPipelineEndpoints:
    """Tests for the balances and transfers endpoints."""

    def test_balances(self, client):
        body = client.get(f"/wallets/{WALLET}/balances").json()

        assert [b["symbol"] for b in body["balances"]] == ["USDC", "DAI", "ETH"]
        assert Decimal(body["total_balance_usd"]) == Decimal("4502.998")

    def test_transfers(self, client):
        body = client.get(f"/wallets/{WALLET}/transfers", params={"max_transfers": 2}).json()

        assert [t["tx_hash"] for t in body["transfers"]] == ["0xaaa", "0xbbb"]
        assert Decimal(body["total_volume_usd"]) == Decimal("3.75")

    def test_balances_upstream_failure_is_502(self, failing_client):
        response = failing_client.get(f"/wallets/{WALLET}/balances")

        assert response.status_code == 502

    def test_transfers_invalid_address_is_400(self, client):
        response = client.get("/wallets/not-an-address/transfers")

        assert response.status_code == 400


# =============================================================================
# CACHE ENDPOINT
# =============================================================================


class TestCacheEndpoint:
    """Tests for DELETE /cache."""

    def test_clear_cache_forces_refetch(self, client, balances_provider):
        """
        GIVEN balances fetched once
        WHEN the cache is cleared and balances are requested again
        THEN the provider is called a second time
        """
        client.get(f"/wallets/{WALLET}/balances")
        client.get(f"/wallets/{WALLET}/balances")
        assert balances_provider.call_count("token_balances") == 1

        response = client.delete("/cache")
        client.get(f"/wallets/{WALLET}/balances")

        assert response.status_code == 200
        assert balances_provider.call_count("token_balances") == 2
