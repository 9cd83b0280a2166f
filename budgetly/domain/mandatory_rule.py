"""
Mandatory rule - recurring fixed deduction (rent, loan EMI, SIP, ...)

Rules are not month-scoped. Only active rules count towards the mandatory
total and towards rollover accrual; the engine applies them fresh each month.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any


@dataclass
class MandatoryRule:
    id: str
    user_id: str
    name: str
    amount: Decimal
    is_active: bool = True
    created_at: datetime | None = None

    @staticmethod
    def create(user_id: str, name: str, amount: Decimal) -> Dict[str, Any]:
        """
        Build a mandatory_rules record (new rules are active)

        Args:
            user_id: Owner
            name: Display name, already trimmed
            amount: Monthly amount

        Returns:
            Record for the mandatory_rules collection
        """
        return {
            "user_id": user_id,
            "name": name,
            "amount": amount,
            "is_active": True,
            "created_at": datetime.now(timezone.utc),
        }

    @staticmethod
    def update(
        name: str | None = None,
        amount: Decimal | None = None,
        is_active: bool | None = None,
    ) -> Dict[str, Any]:
        """Partial update with only the supplied fields."""
        changes: Dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if amount is not None:
            changes["amount"] = amount
        if is_active is not None:
            changes["is_active"] = is_active
        return changes

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MandatoryRule":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            name=record["name"],
            amount=Decimal(record["amount"]),
            is_active=bool(record.get("is_active", True)),
            created_at=record.get("created_at"),
        )
