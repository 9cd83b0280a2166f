"""
Dashboard - aggregated view of one month

Pure read-layer: no mutations. Loaded after the session-start rollover so
it always reflects the user's now-current month.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from budgetly.application.categories import CategoryOverview, get_category_overview
from budgetly.application.income import get_monthly_income
from budgetly.application.rules import get_active_rules
from budgetly.application.savings import SavingsBreakdown, SavingsService
from budgetly.domain.category import Category
from budgetly.domain.mandatory_rule import MandatoryRule
from budgetly.domain.month import MonthKey
from budgetly.infrastructure.store import LedgerStore
from budgetly.utils.money import calculate_percentage


@dataclass(frozen=True)
class CategoryUsage:
    category_id: str
    name: str
    budgeted: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: int
    is_overspent: bool


@dataclass(frozen=True)
class Insights:
    spent_percentage: int
    saved_percentage: int
    remaining: Decimal          # income - spent
    top_category: str | None    # only when something was spent
    top_category_spent: Decimal


@dataclass
class DashboardOverview:
    month: str
    month_label: str
    income: Decimal
    mandatory_total: Decimal
    available_balance: Decimal  # income - mandatory total
    can_add_expense: bool
    categories: CategoryOverview
    category_usage: list[CategoryUsage]
    month_savings: Decimal
    savings_breakdown: SavingsBreakdown
    insights: Insights
    mandatory_rules: list[MandatoryRule] = field(default_factory=list)


def build_category_usage(category: Category) -> CategoryUsage:
    return CategoryUsage(
        category_id=category.id,
        name=category.name,
        budgeted=category.budgeted,
        spent=category.spent,
        remaining=category.remaining,
        percentage=calculate_percentage(category.spent, category.budgeted),
        is_overspent=category.is_overspent,
    )


def build_insights(income: Decimal, total_spent: Decimal, savings_total: Decimal,
                   categories: list[Category]) -> Insights:
    top = max(categories, key=lambda c: c.spent, default=None)
    if top is not None and top.spent <= 0:
        top = None
    return Insights(
        spent_percentage=calculate_percentage(total_spent, income),
        saved_percentage=calculate_percentage(savings_total, income),
        remaining=income - total_spent,
        top_category=top.name if top else None,
        top_category_spent=top.spent if top else Decimal("0"),
    )


class DashboardService:
    def __init__(self, store: LedgerStore):
        self.store = store
        self.savings = SavingsService(store)

    def overview(self, user_id: str, month: str | MonthKey) -> DashboardOverview:
        month_key = MonthKey.parse(month)

        income_record = get_monthly_income(self.store, user_id, month_key)
        income = income_record.amount if income_record else Decimal("0")
        rules = get_active_rules(self.store, user_id)
        mandatory_total = sum((r.amount for r in rules), Decimal("0"))
        categories = get_category_overview(self.store, user_id, month_key)
        breakdown = self.savings.breakdown(user_id, month_key)
        available = income - mandatory_total

        return DashboardOverview(
            month=str(month_key),
            month_label=month_key.label(),
            income=income,
            mandatory_total=mandatory_total,
            available_balance=available,
            can_add_expense=available > 0,
            categories=categories,
            category_usage=[build_category_usage(c) for c in categories.categories],
            month_savings=breakdown.total,
            savings_breakdown=breakdown,
            insights=build_insights(income, categories.total_spent, breakdown.total, categories.categories),
            mandatory_rules=rules,
        )
