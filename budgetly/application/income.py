"""
Income use cases - one income figure per user per month

Both write paths keep (user_id, month) unique: the store rejects a second
record for the pair, and a writer that loses a create race falls back to
updating the winner's record.
"""
import logging
from decimal import Decimal

from budgetly.application.common import parse_amount, parse_month
from budgetly.application.errors import LedgerValidationError
from budgetly.domain.income import MonthlyIncome
from budgetly.domain.month import MonthKey
from budgetly.infrastructure.store import LedgerStore, DuplicateRecordError, MONTHLY_INCOME

logger = logging.getLogger(__name__)


class IncomeValidationError(LedgerValidationError):
    """Invalid income input"""
    pass


def get_monthly_income(store: LedgerStore, user_id: str, month: str | MonthKey) -> MonthlyIncome | None:
    """Income record for (user, month) or None"""
    records = store.query(MONTHLY_INCOME, [("user_id", user_id), ("month", str(MonthKey.parse(month)))])
    if not records:
        return None
    return MonthlyIncome.from_record(records[0])


def get_income_history(store: LedgerStore, user_id: str, limit: int = 12) -> list[MonthlyIncome]:
    """Income records of a user, newest month first"""
    records = store.query(MONTHLY_INCOME, [("user_id", user_id)])
    incomes = [MonthlyIncome.from_record(r) for r in records]
    incomes.sort(key=lambda i: i.month, reverse=True)
    return incomes[:limit]


class SetMonthlyIncomeUseCase:
    """Use case: set (upsert) the income of a month"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, user_id: str, month: str | MonthKey, amount) -> str:
        """
        Create or replace the month's income

        Args:
            user_id: Owner
            month: YYYY-MM
            amount: New income amount (positive)

        Returns:
            id of the income record
        """
        month_key = parse_month(month, IncomeValidationError)
        amount = parse_amount(amount, IncomeValidationError)

        existing = get_monthly_income(self.store, user_id, month_key)
        if existing is not None:
            self.store.update(MONTHLY_INCOME, existing.id, MonthlyIncome.set_amount(amount))
            return existing.id

        try:
            return self.store.create(MONTHLY_INCOME, MonthlyIncome.create(user_id, month_key, amount))
        except DuplicateRecordError:
            # Another writer created the record between our read and create
            logger.info("Income for %s/%s created concurrently, updating instead", user_id, month_key)
            winner = get_monthly_income(self.store, user_id, month_key)
            self.store.update(MONTHLY_INCOME, winner.id, MonthlyIncome.set_amount(amount))
            return winner.id


class AddToMonthlyIncomeUseCase:
    """
    Use case: add extra money to the month's income

    Uses the store's atomic increment, never read-modify-write, so
    concurrent top-ups all land.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(self, user_id: str, month: str | MonthKey, extra_amount) -> str:
        """
        Returns:
            id of the income record
        """
        month_key = parse_month(month, IncomeValidationError)
        extra_amount = parse_amount(extra_amount, IncomeValidationError)

        existing = get_monthly_income(self.store, user_id, month_key)
        if existing is None:
            try:
                return self.store.create(
                    MONTHLY_INCOME, MonthlyIncome.create(user_id, month_key, extra_amount)
                )
            except DuplicateRecordError:
                existing = get_monthly_income(self.store, user_id, month_key)

        self._increment(existing.id, extra_amount)
        return existing.id

    def _increment(self, income_id: str, delta: Decimal) -> None:
        self.store.increment_field(MONTHLY_INCOME, income_id, "amount", delta)
        self.store.update(MONTHLY_INCOME, income_id, MonthlyIncome.relock())
