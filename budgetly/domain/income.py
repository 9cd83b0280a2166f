"""
Monthly income - one figure per user per month

Invariant: at most one record per (user_id, month). Writes go through the
income use cases, which upsert and never duplicate.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from budgetly.domain.month import MonthKey


@dataclass
class MonthlyIncome:
    id: str
    user_id: str
    month: str
    amount: Decimal
    locked_at: datetime | None = None

    @staticmethod
    def create(user_id: str, month: MonthKey, amount: Decimal) -> Dict[str, Any]:
        """
        Build a monthly_income record

        Args:
            user_id: Owner
            month: Month the income belongs to
            amount: Income amount

        Returns:
            Record for the monthly_income collection
        """
        return {
            "user_id": user_id,
            "month": str(month),
            "amount": amount,
            "locked_at": datetime.now(timezone.utc),
        }

    @staticmethod
    def set_amount(amount: Decimal) -> Dict[str, Any]:
        """Partial update replacing the amount (re-locks the record)."""
        return {"amount": amount, "locked_at": datetime.now(timezone.utc)}

    @staticmethod
    def relock() -> Dict[str, Any]:
        return {"locked_at": datetime.now(timezone.utc)}

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MonthlyIncome":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            month=record["month"],
            amount=Decimal(record["amount"]),
            locked_at=record.get("locked_at"),
        )
