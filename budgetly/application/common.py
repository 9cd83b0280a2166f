"""
Input coercion shared by the use cases

Both helpers re-raise as the caller's validation error class so every
module surfaces its own error type.
"""
from decimal import Decimal
from typing import Type

from budgetly.application.errors import LedgerValidationError
from budgetly.domain.month import MonthKey
from budgetly.utils.validation import to_positive_amount


def parse_month(value, error_cls: Type[LedgerValidationError]) -> MonthKey:
    try:
        return MonthKey.parse(value)
    except ValueError as e:
        raise error_cls(str(e)) from e


def parse_amount(value, error_cls: Type[LedgerValidationError]) -> Decimal:
    try:
        return to_positive_amount(value)
    except ValueError as e:
        raise error_cls(str(e)) from e


def parse_name(value: str | None, error_cls: Type[LedgerValidationError], what: str = "Name") -> str:
    name = (value or "").strip()
    if not name:
        raise error_cls(f"{what} must not be empty")
    return name
