"""
Tests for expense use cases
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from budgetly.application.categories import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    get_month_categories,
)
from budgetly.application.expenses import (
    ExpenseValidationError,
    RecordExpenseUseCase,
    RemoveExpenseUseCase,
    get_category_expenses,
    get_month_expenses,
    get_recent_expenses,
    get_total_month_expenses,
)
from budgetly.infrastructure.store import CATEGORIES, EXPENSES, RecordNotFoundError


@pytest.fixture
def food(store, user_id):
    return CreateCategoryUseCase(store).execute(user_id, "2026-02", "Food", "1000")


def _spent(store, category_id):
    return Decimal(store.get(CATEGORIES, category_id)["spent"])


class TestRecordExpense:
    def test_record_increments_spent(self, store, user_id, food):
        use_case = RecordExpenseUseCase(store)
        use_case.execute(user_id, "2026-02", food, "250", note=" lunch ")
        use_case.execute(user_id, "2026-02", food, "100.50")

        assert _spent(store, food) == Decimal("350.50")
        expenses = get_month_expenses(store, user_id, "2026-02")
        assert len(expenses) == 2
        assert {e.note for e in expenses} == {"lunch", ""}
        assert get_total_month_expenses(store, user_id, "2026-02") == Decimal("350.50")

    def test_overspend_is_allowed(self, store, user_id, food):
        RecordExpenseUseCase(store).execute(user_id, "2026-02", food, "1500")

        [category] = get_month_categories(store, user_id, "2026-02")
        assert category.is_overspent
        assert category.remaining == Decimal("-500")

    def test_missing_category_selection(self, memory_store, user_id):
        with pytest.raises(ExpenseValidationError, match="select a category"):
            RecordExpenseUseCase(memory_store).execute(user_id, "2026-02", "", "10")

    @pytest.mark.parametrize("amount", ["0", "-1", "abc", ""])
    def test_invalid_amount(self, store, user_id, food, amount):
        with pytest.raises(ExpenseValidationError):
            RecordExpenseUseCase(store).execute(user_id, "2026-02", food, amount)
        assert store.query(EXPENSES) == []
        assert _spent(store, food) == Decimal("0")

    def test_unknown_category(self, memory_store, user_id):
        with pytest.raises(RecordNotFoundError):
            RecordExpenseUseCase(memory_store).execute(user_id, "2026-02", "ghost", "10")


class TestRemoveExpense:
    def test_remove_restores_spent(self, store, user_id, food):
        record = RecordExpenseUseCase(store)
        keep = record.execute(user_id, "2026-02", food, "200")
        drop = record.execute(user_id, "2026-02", food, "300")

        RemoveExpenseUseCase(store).execute(drop, food, "300")

        assert _spent(store, food) == Decimal("200")
        assert [e.id for e in get_month_expenses(store, user_id, "2026-02")] == [keep]

    def test_remove_expense_of_deleted_category(self, store, user_id, food):
        expense_id = RecordExpenseUseCase(store).execute(user_id, "2026-02", food, "300")
        DeleteCategoryUseCase(store).execute(food)

        RemoveExpenseUseCase(store).execute(expense_id, food, "300")

        assert store.get(EXPENSES, expense_id) is None
        assert get_month_expenses(store, user_id, "2026-02") == []

    def test_remove_missing_expense(self, store, food):
        with pytest.raises(RecordNotFoundError):
            RemoveExpenseUseCase(store).execute("ghost", food, "10")
        assert _spent(store, food) == Decimal("0")


def test_category_expenses_latest_date_first(store, user_id, food):
    use_case = RecordExpenseUseCase(store)
    old = use_case.execute(user_id, "2026-02", food, "1", spent_on=datetime(2026, 2, 1, tzinfo=timezone.utc))
    new = use_case.execute(user_id, "2026-02", food, "2", spent_on=datetime(2026, 2, 20, tzinfo=timezone.utc))
    mid = use_case.execute(user_id, "2026-02", food, "3", spent_on=datetime(2026, 2, 10, tzinfo=timezone.utc))

    assert [e.id for e in get_category_expenses(store, user_id, food)] == [new, mid, old]


def test_recent_expenses_limit(memory_store, user_id):
    food = CreateCategoryUseCase(memory_store).execute(user_id, "2026-02", "Food", "1000")
    use_case = RecordExpenseUseCase(memory_store)
    for _ in range(5):
        use_case.execute(user_id, "2026-02", food, "1")

    assert len(get_recent_expenses(memory_store, user_id, "2026-02", limit=3)) == 3
