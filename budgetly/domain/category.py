"""
Category - per-month discretionary spending envelope

"Food" in March and "Food" in April are different records with independent
budgets. `spent` starts at 0 and changes only through expense create/delete
(relative increments); budget edits never write it.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from budgetly.domain.month import MonthKey


# Offered on the category setup step of onboarding
DEFAULT_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Personal Care",
    "Miscellaneous",
]


@dataclass
class Category:
    id: str
    user_id: str
    month: str
    name: str
    budgeted: Decimal
    spent: Decimal
    created_at: datetime | None = None

    @staticmethod
    def create(user_id: str, month: MonthKey, name: str, budgeted: Decimal) -> Dict[str, Any]:
        """
        Build a categories record

        Args:
            user_id: Owner
            month: Month the envelope belongs to
            name: Display name, already trimmed
            budgeted: Budget ceiling

        Returns:
            Record for the categories collection
        """
        return {
            "user_id": user_id,
            "month": str(month),
            "name": name,
            "budgeted": budgeted,
            "spent": Decimal("0"),
            "created_at": datetime.now(timezone.utc),
        }

    @staticmethod
    def update(name: str | None = None, budgeted: Decimal | None = None) -> Dict[str, Any]:
        """Partial update of name and/or budget. `spent` is never part of it."""
        changes: Dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if budgeted is not None:
            changes["budgeted"] = budgeted
        return changes

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Category":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            month=record["month"],
            name=record["name"],
            budgeted=Decimal(record["budgeted"]),
            spent=Decimal(record.get("spent") or 0),
            created_at=record.get("created_at"),
        )

    @property
    def remaining(self) -> Decimal:
        return self.budgeted - self.spent

    @property
    def is_overspent(self) -> bool:
        # Overspending is allowed, only surfaced as a warning
        return self.spent > self.budgeted
