"""
MonthKey - validated "YYYY-MM" value type

Every month-scoped record (income, categories, expenses, savings) and the
user's current-month marker store the zero-padded string form, so plain
string comparison of two keys matches chronological order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def is_valid_month(text: str) -> bool:
    """Check that text is a YYYY-MM month key."""
    return bool(isinstance(text, str) and _MONTH_RE.match(text))


@dataclass(frozen=True, order=True)
class MonthKey:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not 0 <= self.year <= 9999:
            raise ValueError(f"year must be in 0..9999, got {self.year}")

    @classmethod
    def parse(cls, text: str | MonthKey) -> MonthKey:
        """
        Parse a YYYY-MM string

        Raises:
            ValueError: text is not a zero-padded YYYY-MM key
        """
        if isinstance(text, MonthKey):
            return text
        if not is_valid_month(text):
            raise ValueError(f"Invalid month key: {text!r} (expected YYYY-MM)")
        year, month = text.split("-")
        return cls(int(year), int(month))

    @classmethod
    def from_datetime(cls, value: datetime) -> MonthKey:
        return cls(value.year, value.month)

    @classmethod
    def current(cls, tz: str | ZoneInfo | None = None, now: datetime | None = None) -> MonthKey:
        """
        Real current month in the given timezone

        Args:
            tz: IANA timezone name or ZoneInfo (None = local time)
            now: override for "now" (tests)
        """
        if isinstance(tz, str):
            tz = ZoneInfo(tz)
        if now is None:
            now = datetime.now(tz)
        elif tz is not None and now.tzinfo is not None:
            now = now.astimezone(tz)
        return cls.from_datetime(now)

    def next(self) -> MonthKey:
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    def previous(self) -> MonthKey:
        if self.month == 1:
            return MonthKey(self.year - 1, 12)
        return MonthKey(self.year, self.month - 1)

    def months_until(self, other: MonthKey) -> int:
        """Number of month steps from self to other (negative if other is earlier)."""
        return (other.year - self.year) * 12 + (other.month - self.month)

    def label(self) -> str:
        """Human readable form, e.g. "February 2026"."""
        return f"{_MONTH_NAMES[self.month - 1]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
