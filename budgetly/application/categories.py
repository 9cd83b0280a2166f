"""
Category use cases - per-month spending envelopes

`spent` is owned by the expense use cases: nothing in this module writes it.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from budgetly.application.common import parse_amount, parse_month, parse_name
from budgetly.application.errors import LedgerValidationError
from budgetly.application.income import get_monthly_income
from budgetly.application.rules import get_total_mandatory_amount
from budgetly.domain.category import Category
from budgetly.domain.month import MonthKey
from budgetly.infrastructure.store import LedgerStore, CATEGORIES


class CategoryValidationError(LedgerValidationError):
    """Invalid category input"""
    pass


@dataclass
class CategoryOverview:
    total_budgeted: Decimal
    total_spent: Decimal
    remaining: Decimal
    categories: list[Category] = field(default_factory=list)


def get_month_categories(store: LedgerStore, user_id: str, month: str | MonthKey) -> list[Category]:
    records = store.query(CATEGORIES, [("user_id", user_id), ("month", str(MonthKey.parse(month)))])
    categories = [Category.from_record(r) for r in records]
    categories.sort(key=lambda c: (c.created_at is None, c.created_at or 0, c.name))
    return categories


def get_category_overview(store: LedgerStore, user_id: str, month: str | MonthKey) -> CategoryOverview:
    """Totals of a month's categories (remaining may be negative when overspent)"""
    categories = get_month_categories(store, user_id, month)
    total_budgeted = sum((c.budgeted for c in categories), Decimal("0"))
    total_spent = sum((c.spent for c in categories), Decimal("0"))
    return CategoryOverview(
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        remaining=total_budgeted - total_spent,
        categories=categories,
    )


class CreateCategoryUseCase:
    """Use case: add a category to a month"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, user_id: str, month: str | MonthKey, name: str, budgeted) -> str:
        """
        Args:
            user_id: Owner
            month: YYYY-MM
            name: Category name
            budgeted: Budget ceiling (positive)

        Returns:
            category_id
        """
        month_key = parse_month(month, CategoryValidationError)
        name = parse_name(name, CategoryValidationError, "Category name")
        budgeted = parse_amount(budgeted, CategoryValidationError)
        return self.store.create(CATEGORIES, Category.create(user_id, month_key, name, budgeted))


class UpdateCategoryUseCase:
    """Use case: rename a category and/or change its budget"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, category_id: str, name: str | None = None, budgeted=None) -> None:
        if name is not None:
            name = parse_name(name, CategoryValidationError, "Category name")
        if budgeted is not None:
            budgeted = parse_amount(budgeted, CategoryValidationError)

        changes = Category.update(name=name, budgeted=budgeted)
        if not changes:
            raise CategoryValidationError("Nothing to update")
        self.store.update(CATEGORIES, category_id, changes)


class DeleteCategoryUseCase:
    """
    Use case: delete a category

    Its expenses are left in place and no longer counted anywhere.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, category_id: str) -> None:
        self.store.delete(CATEGORIES, category_id)


class SetupMonthCategoriesUseCase:
    """
    Use case: onboarding step - allocate the available balance to categories

    Available balance = month income - active mandatory total.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, user_id: str, month: str | MonthKey, budgets: dict[str, object]) -> list[str]:
        """
        Args:
            user_id: Owner
            month: YYYY-MM
            budgets: {category name: budget}; empty / zero budgets are skipped

        Returns:
            ids of the created categories, in input order

        Raises:
            CategoryValidationError: any entry invalid, nothing allocated, or the
                allocation exceeds the available balance (nothing is stored then)
        """
        month_key = parse_month(month, CategoryValidationError)

        allocated: list[tuple[str, Decimal]] = []
        for name, raw in budgets.items():
            if raw in (None, ""):
                continue
            try:
                budget = Decimal(str(raw).replace(",", "."))
            except ArithmeticError:
                raise CategoryValidationError(f"Invalid budget for {name!r}") from None
            if not budget.is_finite():
                raise CategoryValidationError(f"Invalid budget for {name!r}")
            if budget <= 0:
                continue
            allocated.append((
                parse_name(name, CategoryValidationError, "Category name"),
                parse_amount(raw, CategoryValidationError),
            ))

        if not allocated:
            raise CategoryValidationError("Please set at least one category budget")

        income = get_monthly_income(self.store, user_id, month_key)
        available = (income.amount if income else Decimal("0")) - get_total_mandatory_amount(self.store, user_id)
        total = sum((b for _, b in allocated), Decimal("0"))
        if total > available:
            raise CategoryValidationError("Total budget exceeds available balance")

        return [
            self.store.create(CATEGORIES, Category.create(user_id, month_key, name, budget))
            for name, budget in allocated
        ]
