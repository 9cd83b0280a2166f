"""
Income API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from budgetly.api.deps import get_current_month, get_current_user_id, get_store
from budgetly.api.v1.schemas import MonthAmountRequest
from budgetly.application.income import (
    AddToMonthlyIncomeUseCase,
    SetMonthlyIncomeUseCase,
    get_income_history,
    get_monthly_income,
)
from budgetly.domain.income import MonthlyIncome
from budgetly.infrastructure.store import LedgerStore


router = APIRouter(prefix="/api/v1/income", tags=["income"])


class IncomeRequest(MonthAmountRequest):
    pass


class IncomeResponse(BaseModel):
    month: str
    amount: str
    locked_at: str | None = None


def _to_response(month: str, income: MonthlyIncome | None) -> IncomeResponse:
    if income is None:
        return IncomeResponse(month=month, amount="0")
    return IncomeResponse(
        month=income.month,
        amount=str(income.amount),
        locked_at=income.locked_at.isoformat() if income.locked_at else None,
    )


@router.get("/", response_model=IncomeResponse)
def read_income(
    month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Income of the user's current month"""
    return _to_response(month, get_monthly_income(store, user_id, month))


@router.put("/", response_model=IncomeResponse)
def set_income(
    req: IncomeRequest,
    current_month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Set (replace) the month's income"""
    month = req.month or current_month
    SetMonthlyIncomeUseCase(store).execute(user_id, month, req.amount)
    return _to_response(month, get_monthly_income(store, user_id, month))


@router.post("/add", response_model=IncomeResponse)
def add_income(
    req: IncomeRequest,
    current_month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Add extra money to the month's income"""
    month = req.month or current_month
    AddToMonthlyIncomeUseCase(store).execute(user_id, month, req.amount)
    return _to_response(month, get_monthly_income(store, user_id, month))


@router.get("/history", response_model=list[IncomeResponse])
def income_history(
    limit: int = 12,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    return [_to_response(i.month, i) for i in get_income_history(store, user_id, limit)]
