"""
Expense use cases

Recording writes the expense first and then adds its amount to the
category's `spent`; removal deletes it and subtracts the same amount. Both
adjustments are relative increments so concurrent expenses on one category
never overwrite each other.
"""
import logging
from datetime import datetime
from decimal import Decimal

from budgetly.application.common import parse_amount, parse_month
from budgetly.application.errors import LedgerValidationError
from budgetly.domain.expense import Expense
from budgetly.domain.month import MonthKey
from budgetly.infrastructure.store import LedgerStore, RecordNotFoundError, CATEGORIES, EXPENSES

logger = logging.getLogger(__name__)


class ExpenseValidationError(LedgerValidationError):
    """Invalid expense input"""
    pass


def _newest_first(expenses: list[Expense], key: str) -> list[Expense]:
    return sorted(expenses, key=lambda e: (getattr(e, key) is not None, getattr(e, key) or 0), reverse=True)


def get_month_expenses(store: LedgerStore, user_id: str, month: str | MonthKey) -> list[Expense]:
    """Expenses of a month, most recently created first"""
    records = store.query(EXPENSES, [("user_id", user_id), ("month", str(MonthKey.parse(month)))])
    return _newest_first([Expense.from_record(r) for r in records], "created_at")


def get_category_expenses(store: LedgerStore, user_id: str, category_id: str) -> list[Expense]:
    """Expenses of a category, latest spend date first"""
    records = store.query(EXPENSES, [("user_id", user_id), ("category_id", category_id)])
    return _newest_first([Expense.from_record(r) for r in records], "date")


def get_total_month_expenses(store: LedgerStore, user_id: str, month: str | MonthKey) -> Decimal:
    return sum((e.amount for e in get_month_expenses(store, user_id, month)), Decimal("0"))


def get_recent_expenses(store: LedgerStore, user_id: str, month: str | MonthKey, limit: int = 10) -> list[Expense]:
    return get_month_expenses(store, user_id, month)[:limit]


class RecordExpenseUseCase:
    """Use case: record an expense against a category"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(
        self,
        user_id: str,
        month: str | MonthKey,
        category_id: str,
        amount,
        note: str = "",
        spent_on: datetime | None = None,
    ) -> str:
        """
        Args:
            user_id: Owner
            month: YYYY-MM the expense is booked into
            category_id: Category to charge (must exist; not checked)
            amount: Positive amount
            note: Free text
            spent_on: Spend date (default=now)

        Returns:
            expense_id

        Note:
            Overspending (spent > budgeted) is allowed.
        """
        month_key = parse_month(month, ExpenseValidationError)
        if not category_id:
            raise ExpenseValidationError("Please select a category")
        amount = parse_amount(amount, ExpenseValidationError)

        expense_id = self.store.create(
            EXPENSES,
            Expense.create(user_id, month_key, category_id, amount, (note or "").strip(), spent_on),
        )
        try:
            self.store.increment_field(CATEGORIES, category_id, "spent", amount)
        except RecordNotFoundError:
            logger.warning("Expense %s points to missing category %s", expense_id, category_id)
            raise
        return expense_id


class RemoveExpenseUseCase:
    """
    Use case: delete an expense and give its amount back to the category

    The caller passes the amount that was recorded; the expense is not
    re-read. Expenses of an already deleted category are removed without
    touching any total.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, expense_id: str, category_id: str, amount) -> None:
        if not category_id:
            raise ExpenseValidationError("Please select a category")
        amount = parse_amount(amount, ExpenseValidationError)

        self.store.delete(EXPENSES, expense_id)
        try:
            self.store.increment_field(CATEGORIES, category_id, "spent", -amount)
        except RecordNotFoundError:
            # Category deleted earlier; its spent total is gone with it
            logger.warning("Removed expense %s of deleted category %s", expense_id, category_id)
