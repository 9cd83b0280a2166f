"""
Expense - individual spend record against a month's category
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from budgetly.domain.month import MonthKey


@dataclass
class Expense:
    id: str
    user_id: str
    month: str
    category_id: str
    amount: Decimal
    note: str
    date: datetime | None = None
    created_at: datetime | None = None

    @staticmethod
    def create(
        user_id: str,
        month: MonthKey,
        category_id: str,
        amount: Decimal,
        note: str = "",
        spent_on: datetime | None = None,
    ) -> Dict[str, Any]:
        """
        Build an expenses record

        Args:
            user_id: Owner
            month: Month the expense is booked into
            category_id: Category whose spent total the expense counts towards
            amount: Positive amount
            note: Free text
            spent_on: When the money was spent (default: now)

        Returns:
            Record for the expenses collection
        """
        now = datetime.now(timezone.utc)
        return {
            "user_id": user_id,
            "month": str(month),
            "category_id": category_id,
            "amount": amount,
            "note": note,
            "date": spent_on or now,
            "created_at": now,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Expense":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            month=record["month"],
            category_id=record["category_id"],
            amount=Decimal(record["amount"]),
            note=record.get("note") or "",
            date=record.get("date"),
            created_at=record.get("created_at"),
        )
