"""
Tests for the portfolio API endpoints.

Tests FastAPI routes end to end against an in-memory SQLite account
store injected through dependency overrides. Covers portfolio,
watchlist, profile and health routes.
Validates identity resolution, response schemas, and error mapping.
"""

from decimal import Decimal

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from app.infrastructure.portfolio.account_repository import SqlAccountRepository
from app.infrastructure.portfolio.database import build_engine
from app.infrastructure.portfolio.tables import create_schema
from app.interfaces.portfolio.dependencies import get_account_repository, get_db_engine
from app.main import app
from app.shared.security.rate_limiting import limiter

ALICE = {"X-User-Id": "alice"}


@pytest.fixture
def client() -> TestClient:
    engine = build_engine("sqlite://")
    create_schema(engine)
    app.dependency_overrides[get_db_engine] = lambda: engine
    app.dependency_overrides[get_account_repository] = lambda: SqlAccountRepository(engine)
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def funded(client) -> TestClient:
    """Client whose user 'alice' holds an account with the seed balance."""
    assert client.post("/api/v1/accounts", headers=ALICE).status_code == 201
    return client


def _buy(client: TestClient, symbol: str, quantity, price, headers=ALICE):
    return client.post(
        "/api/v1/portfolio/buy",
        json={"symbol": symbol, "quantity": quantity, "price": price},
        headers=headers,
    )


def _sell(client: TestClient, symbol: str, quantity, price, headers=ALICE):
    return client.post(
        "/api/v1/portfolio/sell",
        json={"symbol": symbol, "quantity": quantity, "price": price},
        headers=headers,
    )


class TestAccountEndpoint:
    """Tests for POST /api/v1/accounts."""

    def test_open_account_seeds_balance(self, client):
        response = client.post("/api/v1/accounts", headers=ALICE)
        assert response.status_code == 201
        body = response.json()
        assert body["portfolio"] == []
        assert Decimal(body["balance"]) == Decimal("100000")

    def test_duplicate_account_returns_409(self, funded):
        response = funded.post("/api/v1/accounts", headers=ALICE)
        assert response.status_code == 409
        assert response.json() == {"error": "Account already exists"}


class TestIdentity:
    """Tests for caller identity resolution."""

    def test_missing_identity_returns_401(self, client):
        assert client.get("/api/v1/portfolio").status_code == 401

    def test_blank_identity_returns_401(self, client):
        assert client.get("/api/v1/portfolio", headers={"X-User-Id": "  "}).status_code == 401

    def test_unknown_account_returns_404(self, client):
        response = client.get("/api/v1/portfolio", headers={"X-User-Id": "ghost"})
        assert response.status_code == 404
        assert response.json()["error"] == "Account not found"


class TestBuyEndpoint:
    """Tests for POST /api/v1/portfolio/buy."""

    def test_buy_twice_averages_cost(self, funded):
        _buy(funded, "aapl", 10, 100)
        response = _buy(funded, "AAPL", 10, 200)
        assert response.status_code == 200
        body = response.json()
        assert len(body["portfolio"]) == 1
        position = body["portfolio"][0]
        assert position["symbol"] == "AAPL"
        assert position["quantity"] == 20
        assert Decimal(position["average_cost"]) == Decimal("150")
        assert Decimal(body["balance"]) == Decimal("97000")

    def test_insufficient_funds_returns_400(self, funded):
        response = _buy(funded, "AAPL", 1001, 100)
        assert response.status_code == 400
        assert response.json()["error"] == "Insufficient funds"
        portfolio = funded.get("/api/v1/portfolio", headers=ALICE).json()
        assert portfolio["portfolio"] == []
        assert Decimal(portfolio["balance"]) == Decimal("100000")

    def test_exact_balance_buy_leaves_zero(self, funded):
        response = _buy(funded, "AAPL", 1000, 100)
        assert response.status_code == 200
        assert Decimal(response.json()["balance"]) == Decimal("0")

    @pytest.mark.parametrize("quantity,price", [(0, 10), (-1, 10), (1, 0), (1, -5)])
    def test_non_positive_values_return_400(self, funded, quantity, price):
        response = _buy(funded, "AAPL", quantity, price)
        assert response.status_code == 400

    def test_malformed_body_returns_422(self, funded):
        assert _buy(funded, "AAPL", "ten", 10).status_code == 422
        assert _buy(funded, "AAPL", 1.5, 10).status_code == 422

    def test_share_count_above_limit_returns_400(self, funded):
        response = _buy(funded, "A", 10**19, "0.01")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid quantity"
        assert funded.get("/api/v1/portfolio", headers=ALICE).json()["portfolio"] == []

    def test_price_beyond_supported_digits_returns_422(self, funded):
        assert _buy(funded, "A", 1, "0.00000000000001").status_code == 422
        assert _buy(funded, "A", 1, "1" * 41).status_code == 422


class TestSellEndpoint:
    """Tests for POST /api/v1/portfolio/sell."""

    def test_sell_all_removes_position(self, funded):
        _buy(funded, "msft", 5, 10)
        response = _sell(funded, "MSFT", 5, 12)
        assert response.status_code == 200
        body = response.json()
        assert body["portfolio"] == []
        assert Decimal(body["balance"]) == Decimal("100010")

    def test_sell_without_position_returns_400(self, funded):
        response = _sell(funded, "MSFT", 1, 10)
        assert response.status_code == 400
        assert response.json()["error"] == "No position"

    def test_oversell_returns_400(self, funded):
        _buy(funded, "MSFT", 5, 10)
        response = _sell(funded, "msft", 10, 10)
        assert response.status_code == 400
        assert response.json()["error"] == "Insufficient shares"
        held = funded.get("/api/v1/portfolio", headers=ALICE).json()["portfolio"]
        assert held[0]["quantity"] == 5


class TestDepositEndpoint:
    """Tests for POST /api/v1/portfolio/deposit."""

    def test_deposit_returns_balance_only(self, funded):
        response = funded.post(
            "/api/v1/portfolio/deposit", json={"amount": "250.75"}, headers=ALICE
        )
        assert response.status_code == 200
        assert Decimal(response.json()["balance"]) == Decimal("100250.75")
        assert set(response.json()) == {"balance"}

    def test_huge_deposit_keeps_later_buys_exact(self, funded):
        response = funded.post(
            "/api/v1/portfolio/deposit", json={"amount": "1e30"}, headers=ALICE
        )
        assert response.status_code == 200
        _buy(funded, "AAPL", 1, "0.01")
        balance = funded.get("/api/v1/portfolio", headers=ALICE).json()["balance"]
        assert Decimal(balance) == Decimal("1000000000000000000000000099999.99")

    @pytest.mark.parametrize("amount", [0, -10])
    def test_invalid_amount_returns_400(self, funded, amount):
        response = funded.post(
            "/api/v1/portfolio/deposit", json={"amount": amount}, headers=ALICE
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"


class TestWatchlistEndpoints:
    """Tests for /api/v1/watchlist."""

    def test_add_list_remove(self, funded):
        funded.post("/api/v1/watchlist", json={"symbol": "tsla"}, headers=ALICE)
        response = funded.post("/api/v1/watchlist", json={"symbol": "TSLA"}, headers=ALICE)
        assert response.json() == {"watchlist": ["TSLA"]}

        funded.post("/api/v1/watchlist", json={"symbol": "aapl"}, headers=ALICE)
        assert funded.get("/api/v1/watchlist", headers=ALICE).json() == {
            "watchlist": ["TSLA", "AAPL"]
        }

        response = funded.delete("/api/v1/watchlist/tsla", headers=ALICE)
        assert response.json() == {"watchlist": ["AAPL"]}

    def test_blank_symbol_returns_400(self, funded):
        response = funded.post("/api/v1/watchlist", json={"symbol": "  "}, headers=ALICE)
        assert response.status_code == 400


class TestProfileEndpoints:
    """Tests for /api/v1/me."""

    def test_new_account_has_empty_profile(self, funded):
        response = funded.get("/api/v1/me", headers=ALICE)
        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "alice"
        assert body["name"] is None
        assert body["username"] is None
        assert body["created_at"] is not None

    def test_patch_trims_and_lowercases(self, funded):
        response = funded.patch(
            "/api/v1/me",
            json={"name": "  Alice A ", "username": " Alice_99 ", "bio": " hi "},
            headers=ALICE,
        )
        assert response.status_code == 200
        body = response.json()
        assert (body["name"], body["username"], body["bio"]) == ("Alice A", "alice_99", "hi")

    def test_patch_keeps_omitted_fields(self, funded):
        funded.patch("/api/v1/me", json={"name": "Alice"}, headers=ALICE)
        body = funded.patch("/api/v1/me", json={"bio": "trader"}, headers=ALICE).json()
        assert body["name"] == "Alice"
        assert body["bio"] == "trader"

    def test_invalid_username_returns_400(self, funded):
        response = funded.patch("/api/v1/me", json={"username": "a b"}, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid username"

    def test_taken_username_returns_409(self, funded):
        bob = {"X-User-Id": "bob"}
        funded.post("/api/v1/accounts", headers=bob)
        funded.patch("/api/v1/me", json={"username": "trader"}, headers=ALICE)
        response = funded.patch("/api/v1/me", json={"username": "TRADER"}, headers=bob)
        assert response.status_code == 409
        assert response.json() == {"error": "Username already taken"}
        assert funded.get("/api/v1/me", headers=bob).json()["username"] is None

    def test_reclaiming_own_username_succeeds(self, funded):
        funded.patch("/api/v1/me", json={"username": "trader"}, headers=ALICE)
        response = funded.patch("/api/v1/me", json={"username": "Trader"}, headers=ALICE)
        assert response.status_code == 200

    def test_missing_account_returns_404(self, client):
        assert client.get("/api/v1/me", headers=ALICE).status_code == 404


class TestHealthAndHeaders:
    """Tests for the health endpoint and cross-cutting middleware."""

    def test_health_reports_reachable_store(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "ok"

    def test_health_degrades_when_store_is_down(self, client):
        broken = MagicMock(spec=Engine)
        broken.connect.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        app.dependency_overrides[get_db_engine] = lambda: broken
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"

    def test_security_headers_present(self, client):
        response = client.get("/api/v1/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"

    def test_rate_limit_returns_429(self, client):
        statuses = [client.get("/api/v1/health").status_code for _ in range(61)]
        assert statuses[:60] == [200] * 60
        assert statuses[60] == 429
