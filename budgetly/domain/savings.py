"""
Savings entry - append-only accrual ledger

Totals are always recomputed by summing entries; no cached counter exists.
Entries are never updated or deleted.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from budgetly.domain.month import MonthKey


# Savings sources
SAVINGS_SOURCE_MANDATORY = "mandatory"  # accrued from active mandatory rules at rollover
SAVINGS_SOURCE_LEFTOVER = "leftover"    # unspent budget swept into savings (no trigger wired yet)

SAVINGS_SOURCES = (SAVINGS_SOURCE_MANDATORY, SAVINGS_SOURCE_LEFTOVER)


def rollover_idempotency_key(user_id: str, month: MonthKey, rule_id: str) -> str:
    """Idempotency key of the mandatory accrual for one (user, month, rule)."""
    return f"rollover:{user_id}:{month}:{rule_id}"


@dataclass
class SavingsEntry:
    id: str
    user_id: str
    month: str
    amount: Decimal
    source: str
    idempotency_key: str | None = None
    created_at: datetime | None = None

    @staticmethod
    def create(
        user_id: str,
        month: MonthKey,
        amount: Decimal,
        source: str,
        idempotency_key: str | None = None,
    ) -> Dict[str, Any]:
        """
        Build a savings record

        Args:
            user_id: Owner
            month: Month the savings are attributed to
            amount: Amount saved
            source: SAVINGS_SOURCE_MANDATORY or SAVINGS_SOURCE_LEFTOVER
            idempotency_key: Unique key; a second append with the same key is rejected by the store

        Returns:
            Record for the savings collection
        """
        if source not in SAVINGS_SOURCES:
            raise ValueError(f"Unknown savings source: {source}")
        return {
            "user_id": user_id,
            "month": str(month),
            "amount": amount,
            "source": source,
            "idempotency_key": idempotency_key,
            "created_at": datetime.now(timezone.utc),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SavingsEntry":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            month=record["month"],
            amount=Decimal(record["amount"]),
            source=record["source"],
            idempotency_key=record.get("idempotency_key"),
            created_at=record.get("created_at"),
        )
