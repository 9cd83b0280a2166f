"""
Tests for the dashboard read model
"""
from decimal import Decimal

import pytest

from budgetly.application.categories import CreateCategoryUseCase
from budgetly.application.dashboard import DashboardService, build_insights
from budgetly.application.expenses import RecordExpenseUseCase
from budgetly.application.income import SetMonthlyIncomeUseCase
from budgetly.application.rules import CreateMandatoryRuleUseCase
from budgetly.application.savings import AddSavingsUseCase
from budgetly.domain.category import Category


@pytest.fixture
def month_data(store, user_id):
    SetMonthlyIncomeUseCase(store).execute(user_id, "2026-02", "50000")
    CreateMandatoryRuleUseCase(store).execute(user_id, "Rent", "15000")
    CreateMandatoryRuleUseCase(store).execute(user_id, "SIP", "5000")
    create = CreateCategoryUseCase(store)
    food = create.execute(user_id, "2026-02", "Food", "10000")
    travel = create.execute(user_id, "2026-02", "Travel", "2000")
    record = RecordExpenseUseCase(store)
    record.execute(user_id, "2026-02", food, "4000")
    record.execute(user_id, "2026-02", travel, "3000")
    AddSavingsUseCase(store).execute(user_id, "2026-02", "20000", "mandatory")
    return {"food": food, "travel": travel}


def test_overview(store, user_id, month_data):
    view = DashboardService(store).overview(user_id, "2026-02")

    assert view.month == "2026-02"
    assert view.month_label == "February 2026"
    assert view.income == Decimal("50000")
    assert view.mandatory_total == Decimal("20000")
    assert view.available_balance == Decimal("30000")
    assert view.can_add_expense is True
    assert view.categories.total_budgeted == Decimal("12000")
    assert view.categories.total_spent == Decimal("7000")
    assert view.month_savings == Decimal("20000")
    assert view.savings_breakdown.mandatory == Decimal("20000")

    usage = {u.name: u for u in view.category_usage}
    assert usage["Food"].percentage == 40
    assert usage["Travel"].percentage == 150
    assert usage["Travel"].is_overspent is True

    assert view.insights.spent_percentage == 14
    assert view.insights.saved_percentage == 40
    assert view.insights.remaining == Decimal("43000")
    assert view.insights.top_category == "Food"
    assert view.insights.top_category_spent == Decimal("4000")


def test_empty_month(store, user_id):
    view = DashboardService(store).overview(user_id, "2026-02")

    assert view.income == Decimal("0")
    assert view.can_add_expense is False
    assert view.category_usage == []
    assert view.insights.spent_percentage == 0
    assert view.insights.top_category is None


def test_mandatory_exceeding_income_blocks_expenses(store, user_id):
    SetMonthlyIncomeUseCase(store).execute(user_id, "2026-02", "10000")
    CreateMandatoryRuleUseCase(store).execute(user_id, "Rent", "10000")

    view = DashboardService(store).overview(user_id, "2026-02")
    assert view.available_balance == Decimal("0")
    assert view.can_add_expense is False


def test_insights_ignore_untouched_categories():
    categories = [
        Category(id="c1", user_id="u1", month="2026-02", name="Food", budgeted=Decimal("100"), spent=Decimal("0")),
    ]
    insights = build_insights(Decimal("1000"), Decimal("0"), Decimal("0"), categories)
    assert insights.top_category is None
    assert insights.top_category_spent == Decimal("0")
