"""
Shared request/response pieces for the v1 API
"""
from pydantic import BaseModel, field_validator

from budgetly.domain.month import is_valid_month
from budgetly.utils.validation import validate_decimal_amount


def check_amount(v: str | None) -> str | None:
    if v is not None:
        is_valid, error = validate_decimal_amount(v)
        if not is_valid:
            raise ValueError(error)
    return v


class AmountRequest(BaseModel):
    amount: str  # Decimal as string

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        return check_amount(v)


def validate_month_field(v: str | None) -> str | None:
    if v is not None and not is_valid_month(v):
        raise ValueError(f"month must be YYYY-MM, got: {v}")
    return v


class SavingsBreakdownResponse(BaseModel):
    mandatory: str
    leftover: str
    total: str


class MonthAmountRequest(AmountRequest):
    month: str | None = None  # default: user's current month

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str | None) -> str | None:
        return validate_month_field(v)
