"""
Tests for category use cases
"""
from decimal import Decimal

import pytest

from budgetly.application.categories import (
    CategoryValidationError,
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    SetupMonthCategoriesUseCase,
    UpdateCategoryUseCase,
    get_category_overview,
    get_month_categories,
)
from budgetly.application.income import SetMonthlyIncomeUseCase
from budgetly.application.rules import CreateMandatoryRuleUseCase
from budgetly.infrastructure.store import CATEGORIES


@pytest.fixture
def funded(store, user_id):
    """Income 50000, mandatory 20000 -> 30000 available in Feb 2026"""
    SetMonthlyIncomeUseCase(store).execute(user_id, "2026-02", "50000")
    CreateMandatoryRuleUseCase(store).execute(user_id, "Rent", "20000")
    return store


class TestCreateCategory:
    def test_create(self, store, user_id):
        cat_id = CreateCategoryUseCase(store).execute(user_id, "2026-02", "Food", "8000")

        [category] = get_month_categories(store, user_id, "2026-02")
        assert category.id == cat_id
        assert category.budgeted == Decimal("8000")
        assert category.spent == Decimal("0")

    def test_categories_are_per_month(self, store, user_id):
        use_case = CreateCategoryUseCase(store)
        use_case.execute(user_id, "2026-02", "Food", "8000")
        use_case.execute(user_id, "2026-03", "Food", "9000")

        assert [c.budgeted for c in get_month_categories(store, user_id, "2026-02")] == [Decimal("8000")]
        assert [c.budgeted for c in get_month_categories(store, user_id, "2026-03")] == [Decimal("9000")]

    @pytest.mark.parametrize("name,budget", [("", "100"), ("Food", "0"), ("Food", "x")])
    def test_invalid_input(self, memory_store, user_id, name, budget):
        with pytest.raises(CategoryValidationError):
            CreateCategoryUseCase(memory_store).execute(user_id, "2026-02", name, budget)


class TestUpdateCategory:
    def test_budget_edit_keeps_spent(self, store, user_id):
        cat_id = CreateCategoryUseCase(store).execute(user_id, "2026-02", "Food", "8000")
        store.increment_field(CATEGORIES, cat_id, "spent", Decimal("1500"))

        UpdateCategoryUseCase(store).execute(cat_id, name="Groceries", budgeted="6000")

        [category] = get_month_categories(store, user_id, "2026-02")
        assert category.name == "Groceries"
        assert category.budgeted == Decimal("6000")
        assert category.spent == Decimal("1500")

    def test_nothing_to_update(self, memory_store, user_id):
        cat_id = CreateCategoryUseCase(memory_store).execute(user_id, "2026-02", "Food", "1")
        with pytest.raises(CategoryValidationError):
            UpdateCategoryUseCase(memory_store).execute(cat_id)


def test_delete_category(store, user_id):
    cat_id = CreateCategoryUseCase(store).execute(user_id, "2026-02", "Food", "1")
    DeleteCategoryUseCase(store).execute(cat_id)
    assert get_month_categories(store, user_id, "2026-02") == []


def test_overview_allows_overspend(store, user_id):
    use_case = CreateCategoryUseCase(store)
    food = use_case.execute(user_id, "2026-02", "Food", "1000")
    use_case.execute(user_id, "2026-02", "Travel", "500")
    store.increment_field(CATEGORIES, food, "spent", Decimal("1800"))

    overview = get_category_overview(store, user_id, "2026-02")
    assert overview.total_budgeted == Decimal("1500")
    assert overview.total_spent == Decimal("1800")
    assert overview.remaining == Decimal("-300")
    overspent = [c for c in overview.categories if c.is_overspent]
    assert [c.name for c in overspent] == ["Food"]


class TestSetupMonthCategories:
    def test_creates_allocated_categories(self, funded, user_id):
        ids = SetupMonthCategoriesUseCase(funded).execute(
            user_id, "2026-02", {"Food": "10000", "Travel": "", "Shopping": "0", "Bills": "5000"}
        )

        assert len(ids) == 2
        names = sorted(c.name for c in get_month_categories(funded, user_id, "2026-02"))
        assert names == ["Bills", "Food"]

    def test_allocation_may_equal_available(self, funded, user_id):
        SetupMonthCategoriesUseCase(funded).execute(user_id, "2026-02", {"Food": "30000"})
        assert get_category_overview(funded, user_id, "2026-02").total_budgeted == Decimal("30000")

    def test_exceeding_available_is_rejected(self, funded, user_id):
        with pytest.raises(CategoryValidationError, match="exceeds available balance"):
            SetupMonthCategoriesUseCase(funded).execute(
                user_id, "2026-02", {"Food": "20000", "Travel": "10000.01"}
            )
        assert get_month_categories(funded, user_id, "2026-02") == []

    def test_nothing_allocated(self, funded, user_id):
        with pytest.raises(CategoryValidationError, match="at least one"):
            SetupMonthCategoriesUseCase(funded).execute(user_id, "2026-02", {"Food": "", "Travel": None})

    def test_no_income_means_nothing_available(self, memory_store, user_id):
        with pytest.raises(CategoryValidationError):
            SetupMonthCategoriesUseCase(memory_store).execute(user_id, "2026-02", {"Food": "1"})

    @pytest.mark.parametrize("budgets", [
        {"Food": "1000", "Travel": "10.555"},
        {"Food": "1000", "   ": "500"},
        {"Food": "1000", "Travel": "lots"},
    ])
    def test_rejected_setup_stores_nothing(self, funded, user_id, budgets):
        with pytest.raises(CategoryValidationError):
            SetupMonthCategoriesUseCase(funded).execute(user_id, "2026-02", budgets)
        assert get_month_categories(funded, user_id, "2026-02") == []

    def test_names_are_trimmed(self, funded, user_id):
        SetupMonthCategoriesUseCase(funded).execute(user_id, "2026-02", {" Food ": "100,50"})
        [category] = get_month_categories(funded, user_id, "2026-02")
        assert category.name == "Food"
        assert category.budgeted == Decimal("100.50")

    def test_garbage_budget(self, funded, user_id):
        with pytest.raises(CategoryValidationError):
            SetupMonthCategoriesUseCase(funded).execute(user_id, "2026-02", {"Food": "lots"})
