"""
User marker - per-user "which month is the dashboard operating in"

current_month is the single source of truth for the active month. It is
written at signup (initialize) and afterwards only by the rollover engine.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any

from budgetly.domain.month import MonthKey


@dataclass
class UserMarker:
    id: str
    email: str
    current_month: str  # YYYY-MM
    created_at: datetime | None = None

    @staticmethod
    def create(user_id: str, email: str, current_month: MonthKey) -> Dict[str, Any]:
        """
        Build the users record for a freshly signed-up user

        Args:
            user_id: ID from the authentication provider
            email: Email address
            current_month: Month the dashboard starts in

        Returns:
            Record for the users collection
        """
        return {
            "id": user_id,
            "email": email,
            "current_month": str(current_month),
            "created_at": datetime.now(timezone.utc),
        }

    @staticmethod
    def advance(current_month: MonthKey) -> Dict[str, Any]:
        """Partial update moving the marker to a new month."""
        return {"current_month": str(current_month)}

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserMarker":
        return cls(
            id=record["id"],
            email=record.get("email", ""),
            current_month=record["current_month"],
            created_at=record.get("created_at"),
        )
