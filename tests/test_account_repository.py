"""
Tests for the SQL account repository adapter.

Runs against SQLite engines. Validates round-tripping of Decimal money
values and profiles, insertion order of child rows, duplicate and
username conflicts, and the optimistic version check, including two
threads racing to spend the same cash.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.application.portfolio.account_updater import AccountUpdater
from app.application.portfolio.buy_stock import BuyStockUseCase
from app.application.portfolio.dtos import TradeCommand
from app.domain.portfolio.entities import Account, Position, Profile
from app.domain.portfolio.errors import (
    AccountAlreadyExistsError,
    InsufficientFundsError,
    StaleAccountError,
    UsernameTakenError,
)
from app.domain.portfolio.ledger import MAX_POSITION_SHARES, PortfolioLedger
from app.infrastructure.portfolio.account_repository import SqlAccountRepository
from app.infrastructure.portfolio.database import build_engine
from app.infrastructure.portfolio.tables import create_schema


@pytest.fixture
def repo() -> SqlAccountRepository:
    engine = build_engine("sqlite://")
    create_schema(engine)
    yield SqlAccountRepository(engine=engine)
    engine.dispose()


def _account(**overrides) -> Account:
    fields = {
        "user_id": "alice",
        "balance": Decimal("100000.00"),
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Account(**fields)


class TestCreateAndGet:
    """Tests for create() and get()."""

    def test_missing_account_returns_none(self, repo):
        assert repo.get("nobody") is None

    def test_roundtrip_preserves_exact_decimals(self, repo):
        repo.create(_account(balance=Decimal("0.10000000000000000001")))
        stored = repo.get("alice")
        assert stored.balance == Decimal("0.10000000000000000001")
        assert stored.version == 0
        assert stored.positions == ()
        assert stored.watchlist == ()

    def test_duplicate_create_rejected(self, repo):
        repo.create(_account())
        with pytest.raises(AccountAlreadyExistsError):
            repo.create(_account(balance=Decimal("1")))
        assert repo.get("alice").balance == Decimal("100000.00")


class TestSave:
    """Tests for save() and its version check."""

    def test_save_writes_children_in_order(self, repo):
        repo.create(_account())
        current = repo.get("alice")
        updated = replace(
            current,
            balance=Decimal("90.5"),
            positions=(
                Position("ZZZ", 3, Decimal("1.5")),
                Position("AAA", 1, Decimal("150.12345678")),
            ),
            watchlist=("TSLA", "AAPL"),
        )

        saved = repo.save(updated, expected_version=current.version)

        assert saved.version == 1
        stored = repo.get("alice")
        assert stored == replace(updated, version=1, created_at=stored.created_at)
        assert [p.symbol for p in stored.positions] == ["ZZZ", "AAA"]
        assert stored.watchlist == ("TSLA", "AAPL")

    def test_save_replaces_removed_positions(self, repo):
        repo.create(_account(positions=(Position("A", 1, Decimal("1")),)))
        current = repo.get("alice")
        repo.save(replace(current, positions=()), expected_version=0)
        assert repo.get("alice").positions == ()

    def test_stale_version_rejected_and_nothing_written(self, repo):
        repo.create(_account())
        first_read = repo.get("alice")
        second_read = repo.get("alice")

        repo.save(replace(first_read, balance=Decimal("1")), expected_version=first_read.version)
        with pytest.raises(StaleAccountError) as info:
            repo.save(
                replace(second_read, balance=Decimal("2"), watchlist=("X",)),
                expected_version=second_read.version,
            )

        assert info.value.expected_version == 0
        stored = repo.get("alice")
        assert stored.balance == Decimal("1")
        assert stored.watchlist == ()
        assert stored.version == 1

    def test_save_unknown_user_is_stale(self, repo):
        with pytest.raises(StaleAccountError):
            repo.save(_account(user_id="ghost"), expected_version=0)

    def test_save_roundtrips_large_share_count(self, repo):
        repo.create(_account())
        current = repo.get("alice")
        big = Position("A", MAX_POSITION_SHARES, Decimal("0.00000001"))
        repo.save(replace(current, positions=(big,)), expected_version=0)
        assert repo.get("alice").positions == (big,)


class TestProfile:
    """Tests for profile persistence and username uniqueness."""

    def test_profile_roundtrip(self, repo):
        repo.create(_account())
        current = repo.get("alice")
        profile = Profile(name="Alice", username="alice_99", bio="Long only")
        repo.save(replace(current, profile=profile), expected_version=0)
        assert repo.get("alice").profile == profile

    def test_new_account_has_empty_profile(self, repo):
        repo.create(_account())
        assert repo.get("alice").profile == Profile()

    def test_taken_username_rejected_and_nothing_written(self, repo):
        repo.create(_account())
        repo.create(_account(user_id="bob"))
        alice = repo.get("alice")
        repo.save(replace(alice, profile=Profile(username="trader")), expected_version=0)

        bob = repo.get("bob")
        with pytest.raises(UsernameTakenError) as info:
            repo.save(
                replace(bob, balance=Decimal("1"), profile=Profile(username="trader")),
                expected_version=0,
            )

        assert info.value.username == "trader"
        stored = repo.get("bob")
        assert stored.profile.username is None
        assert stored.balance == Decimal("100000.00")
        assert stored.version == 0

    def test_accounts_without_username_do_not_conflict(self, repo):
        repo.create(_account())
        repo.create(_account(user_id="bob"))
        for user_id in ("alice", "bob"):
            current = repo.get(user_id)
            repo.save(replace(current, profile=Profile(name="Anon")), expected_version=0)
        assert repo.get("bob").profile.name == "Anon"


# ══════════════════════════════════════════════════════════════════════
# Concurrent orders
# ══════════════════════════════════════════════════════════════════════


class BarrierAccountRepository(SqlAccountRepository):
    """Holds the first reads at a barrier so both orders see the same version."""

    def __init__(self, engine, parties: int) -> None:
        super().__init__(engine)
        self._barrier = threading.Barrier(parties)
        self._lock = threading.Lock()
        self._held_reads = parties

    def get(self, user_id):
        account = super().get(user_id)
        with self._lock:
            hold = self._held_reads > 0
            self._held_reads -= 1
        if hold:
            self._barrier.wait(timeout=10)
        return account


class TestConcurrentOrders:
    """Two threads buying on one account through a file-backed store."""

    def test_racing_buys_never_double_spend(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
        create_schema(engine)
        repo = BarrierAccountRepository(engine, parties=2)
        SqlAccountRepository(engine).create(_account(balance=Decimal("1000")))
        use_case = BuyStockUseCase(
            updater=AccountUpdater(account_repo=repo, max_attempts=3),
            ledger=PortfolioLedger(),
        )
        order = TradeCommand(user_id="alice", symbol="AAPL", quantity=6, price=Decimal("100"))

        def place_order():
            try:
                return use_case.execute(order)
            except InsufficientFundsError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = list(pool.map(lambda _: place_order(), range(2)))
        stored = SqlAccountRepository(engine).get("alice")
        engine.dispose()

        rejected = [o for o in outcomes if isinstance(o, InsufficientFundsError)]
        assert len(rejected) == 1
        assert stored.balance == Decimal("400")
        assert stored.positions == (Position("AAPL", 6, Decimal("100")),)
        assert stored.version == 1
