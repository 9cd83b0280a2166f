"""
Savings ledger - append and summarize

All figures are sums over the append-only entries; nothing is cached, so a
total can always be recomputed from the ledger alone.
"""
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from budgetly.application.common import parse_amount, parse_month
from budgetly.application.errors import LedgerValidationError
from budgetly.domain.month import MonthKey
from budgetly.domain.savings import (
    SavingsEntry,
    SAVINGS_SOURCES,
    SAVINGS_SOURCE_MANDATORY,
    SAVINGS_SOURCE_LEFTOVER,
)
from budgetly.infrastructure.store import LedgerStore, SAVINGS


class SavingsValidationError(LedgerValidationError):
    """Invalid savings input"""
    pass


@dataclass(frozen=True)
class SavingsBreakdown:
    mandatory: Decimal
    leftover: Decimal
    total: Decimal


@dataclass(frozen=True)
class MonthTotal:
    month: str
    total: Decimal


class AddSavingsUseCase:
    """Use case: append one savings entry"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def execute(
        self,
        user_id: str,
        month: str | MonthKey,
        amount,
        source: str,
        idempotency_key: str | None = None,
    ) -> str:
        """
        Args:
            user_id: Owner
            month: YYYY-MM the savings are attributed to
            amount: Positive amount
            source: "mandatory" or "leftover"
            idempotency_key: Optional unique key

        Returns:
            savings entry id

        Raises:
            DuplicateRecordError: idempotency_key was already used
        """
        month_key = parse_month(month, SavingsValidationError)
        amount = parse_amount(amount, SavingsValidationError)
        if source not in SAVINGS_SOURCES:
            raise SavingsValidationError(f"source must be one of {', '.join(SAVINGS_SOURCES)}")
        return self.store.create(
            SAVINGS, SavingsEntry.create(user_id, month_key, amount, source, idempotency_key)
        )


class SavingsService:
    """Read side of the savings ledger"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def entries(self, user_id: str, month: str | MonthKey | None = None) -> list[SavingsEntry]:
        predicates = [("user_id", user_id)]
        if month is not None:
            predicates.append(("month", str(MonthKey.parse(month))))
        return [SavingsEntry.from_record(r) for r in self.store.query(SAVINGS, predicates)]

    def total_savings(self, user_id: str) -> Decimal:
        """All-time total"""
        return sum((e.amount for e in self.entries(user_id)), Decimal("0"))

    def month_savings(self, user_id: str, month: str | MonthKey) -> Decimal:
        return sum((e.amount for e in self.entries(user_id, month)), Decimal("0"))

    def breakdown(self, user_id: str, month: str | MonthKey) -> SavingsBreakdown:
        """
        Partition a month's savings by source

        total == mandatory + leftover == month_savings(user_id, month)
        """
        sums = {SAVINGS_SOURCE_MANDATORY: Decimal("0"), SAVINGS_SOURCE_LEFTOVER: Decimal("0")}
        for entry in self.entries(user_id, month):
            sums[entry.source] += entry.amount
        mandatory = sums[SAVINGS_SOURCE_MANDATORY]
        leftover = sums[SAVINGS_SOURCE_LEFTOVER]
        return SavingsBreakdown(mandatory=mandatory, leftover=leftover, total=mandatory + leftover)

    def history(self, user_id: str, limit: int = 12) -> list[MonthTotal]:
        """Per-month totals, newest month first, at most `limit` months"""
        by_month: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for entry in self.entries(user_id):
            by_month[entry.month] += entry.amount
        months = sorted(by_month, reverse=True)[:max(limit, 0)]
        return [MonthTotal(month=m, total=by_month[m]) for m in months]
