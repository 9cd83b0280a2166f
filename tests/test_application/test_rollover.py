"""
Tests for the month rollover engine
"""
import threading
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from budgetly.application.errors import NotAuthenticatedError
from budgetly.application.rollover import MonthRolloverEngine, RolloverCheck
from budgetly.application.rules import CreateMandatoryRuleUseCase, UpdateMandatoryRuleUseCase
from budgetly.application.savings import SavingsService
from budgetly.domain.month import MonthKey
from budgetly.domain.user import UserMarker
from budgetly.infrastructure.store import (
    InMemoryLedgerStore,
    RecordNotFoundError,
    StoreUnavailableError,
    SAVINGS,
    USERS,
)


def _seed(store, user_id, month="2026-01"):
    store.create(USERS, UserMarker.create(user_id, f"{user_id}@example.com", MonthKey.parse(month)))


def _engine(store, clock):
    return MonthRolloverEngine(store, clock=clock, tz="UTC")


class UnavailableStore(InMemoryLedgerStore):
    def get(self, collection, record_id):
        raise StoreUnavailableError("connection refused")


class LosingStore(InMemoryLedgerStore):
    """Another session advances the marker between our read and our conditional write"""

    def conditional_update(self, collection, record_id, expected, fields):
        super().update(collection, record_id, fields)
        return super().conditional_update(collection, record_id, expected, fields)


@pytest.fixture
def rules(store, user_id):
    """Rent 15000 (active), OldGymMembership 1000 (inactive)"""
    create = CreateMandatoryRuleUseCase(store)
    rent = create.execute(user_id, "Rent", "15000")
    gym = create.execute(user_id, "OldGymMembership", "1000")
    UpdateMandatoryRuleUseCase(store).execute(gym, is_active=False)
    return {"rent": rent, "gym": gym}


class TestRolloverScenario:
    def test_january_to_february(self, store, user_id, clock, rules):
        _seed(store, user_id, "2026-01")
        engine = _engine(store, clock)

        assert engine.needs_rollover(user_id) is True
        result = engine.perform_rollover(user_id)

        assert result.performed is True
        assert (result.from_month, result.to_month) == ("2026-01", "2026-02")
        assert result.entries_created == 1
        assert result.skipped_months == 0
        assert store.get(USERS, user_id)["current_month"] == "2026-02"

        [entry] = SavingsService(store).entries(user_id)
        assert entry.month == "2026-02"
        assert entry.amount == Decimal("15000")
        assert entry.source == "mandatory"
        assert entry.idempotency_key == f"rollover:{user_id}:2026-02:{rules['rent']}"

        breakdown = SavingsService(store).breakdown(user_id, "2026-02")
        assert breakdown.mandatory == Decimal("15000")
        assert breakdown.leftover == Decimal("0")
        assert breakdown.total == Decimal("15000")

        assert engine.needs_rollover(user_id) is False

    def test_no_active_rules_still_advances(self, store, user_id, clock):
        _seed(store, user_id, "2026-01")
        result = _engine(store, clock).perform_rollover(user_id)

        assert result.performed is True
        assert result.entries_created == 0
        assert store.query(SAVINGS) == []


class TestIdempotency:
    def test_second_trigger_is_noop(self, store, user_id, clock, rules):
        _seed(store, user_id, "2026-01")
        engine = _engine(store, clock)

        engine.perform_rollover(user_id)
        again = engine.perform_rollover(user_id)

        assert again.performed is False
        assert again.entries_created == 0
        assert len(store.query(SAVINGS, [("user_id", user_id)])) == 1

    def test_accrual_can_be_rerun(self, store, user_id, clock, rules):
        engine = _engine(store, clock)
        assert engine.accrue_mandatory_savings(user_id, "2026-02") == 1
        assert engine.accrue_mandatory_savings(user_id, "2026-02") == 0
        assert SavingsService(store).month_savings(user_id, "2026-02") == Decimal("15000")

    def test_lost_conditional_write_skips_accrual(self, user_id, clock):
        store = LosingStore()
        _seed(store, user_id, "2026-01")
        CreateMandatoryRuleUseCase(store).execute(user_id, "Rent", "15000")

        result = _engine(store, clock).perform_rollover(user_id)

        assert result.performed is False
        assert store.query(SAVINGS) == []
        assert store.get(USERS, user_id)["current_month"] == "2026-02"

    def test_concurrent_sessions_accrue_once(self, user_id, clock):
        store = InMemoryLedgerStore()
        _seed(store, user_id, "2026-01")
        CreateMandatoryRuleUseCase(store).execute(user_id, "Rent", "15000")
        barrier = threading.Barrier(4)
        results = []

        def session():
            barrier.wait()
            results.append(_engine(store, clock).start_session(user_id))

        threads = [threading.Thread(target=session) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        performed = [r for r in results if r is not None and r.performed]
        assert len(performed) == 1
        assert SavingsService(store).total_savings(user_id) == Decimal("15000")


class TestDetection:
    def test_unknown_when_marker_missing(self, store, clock):
        engine = _engine(store, clock)
        assert engine.check("ghost") is RolloverCheck.UNKNOWN
        assert engine.needs_rollover("ghost") is False

    def test_unknown_when_store_unavailable(self, user_id, clock):
        engine = _engine(UnavailableStore(), clock)
        assert engine.check(user_id) is RolloverCheck.UNKNOWN
        assert engine.needs_rollover(user_id) is False

    def test_perform_without_marker(self, store, clock):
        with pytest.raises(RecordNotFoundError):
            _engine(store, clock).perform_rollover("ghost")

    def test_real_month_recomputed_per_call(self, store, user_id, clock):
        _seed(store, user_id, "2026-02")
        engine = _engine(store, clock)
        assert engine.needs_rollover(user_id) is False

        clock.set(2026, 3, day=1, hour=0)
        assert engine.needs_rollover(user_id) is True

    def test_month_boundary_in_configured_timezone(self, memory_store, user_id):
        _seed(memory_store, user_id, "2026-01")
        # 2026-01-31 20:00 UTC is already February 1st in Asia/Kolkata
        engine = MonthRolloverEngine(
            memory_store,
            clock=lambda: datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc),
            tz="Asia/Kolkata",
        )
        assert engine.current_month() == MonthKey(2026, 2)
        assert engine.needs_rollover(user_id) is True
        assert _engine(memory_store, lambda: datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)).needs_rollover(user_id) is False


class TestMultiMonth:
    def test_absence_jumps_to_real_month(self, store, user_id, clock, rules):
        _seed(store, user_id, "2025-10")
        clock.set(2026, 2)

        result = _engine(store, clock).perform_rollover(user_id)

        assert result.performed is True
        assert result.to_month == "2026-02"
        assert result.skipped_months == 3
        assert result.entries_created == 1
        assert [e.month for e in SavingsService(store).entries(user_id)] == ["2026-02"]

    def test_skipped_months_are_logged(self, store, user_id, clock, caplog):
        _seed(store, user_id, "2025-10")
        clock.set(2026, 2)

        with caplog.at_level("WARNING", logger="budgetly.application.rollover"):
            _engine(store, clock).perform_rollover(user_id)

        assert "2025-11..2026-01" in caplog.text

    def test_never_moves_backwards(self, store, user_id, clock, rules):
        _seed(store, user_id, "2026-03")
        engine = _engine(store, clock)

        assert engine.check(user_id) is RolloverCheck.NOT_NEEDED
        result = engine.perform_rollover(user_id)

        assert result.performed is False
        assert store.get(USERS, user_id)["current_month"] == "2026-03"
        assert store.query(SAVINGS) == []


class TestSession:
    def test_initialize_user(self, store, user_id, clock):
        engine = _engine(store, clock)
        assert engine.initialize_user(user_id, "u1@example.com") is True
        assert store.get(USERS, user_id)["current_month"] == "2026-02"

        clock.set(2026, 5)
        assert engine.initialize_user(user_id, "other@example.com") is False
        marker = engine.get_marker(user_id)
        assert marker.current_month == "2026-02"
        assert marker.email == "u1@example.com"

    def test_start_session_rolls_over_when_due(self, store, user_id, clock, rules):
        _seed(store, user_id, "2026-01")
        engine = _engine(store, clock)

        result = engine.start_session(user_id)
        assert result is not None and result.performed
        assert engine.start_session(user_id) is None

    def test_start_session_requires_user(self, store, clock):
        with pytest.raises(NotAuthenticatedError):
            _engine(store, clock).start_session(None)

    def test_start_session_unknown_user_is_noop(self, store, clock):
        assert _engine(store, clock).start_session("ghost") is None
