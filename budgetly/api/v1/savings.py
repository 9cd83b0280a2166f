"""
Savings API endpoints (read-only: entries are appended by the rollover)
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from budgetly.api.deps import get_current_month, get_current_user_id, get_store
from budgetly.api.v1.schemas import SavingsBreakdownResponse
from budgetly.application.savings import SavingsService
from budgetly.infrastructure.store import LedgerStore


router = APIRouter(prefix="/api/v1/savings", tags=["savings"])


class SavingsSummaryResponse(BaseModel):
    month: str
    month_total: str
    all_time_total: str
    breakdown: SavingsBreakdownResponse


class MonthTotalResponse(BaseModel):
    month: str
    total: str


@router.get("/", response_model=SavingsSummaryResponse)
def savings_summary(
    month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    service = SavingsService(store)
    breakdown = service.breakdown(user_id, month)
    return SavingsSummaryResponse(
        month=month,
        month_total=str(service.month_savings(user_id, month)),
        all_time_total=str(service.total_savings(user_id)),
        breakdown=SavingsBreakdownResponse(
            mandatory=str(breakdown.mandatory),
            leftover=str(breakdown.leftover),
            total=str(breakdown.total),
        ),
    )


@router.get("/history", response_model=list[MonthTotalResponse])
def savings_history(
    limit: int = 12,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Per-month savings totals, newest first"""
    return [
        MonthTotalResponse(month=item.month, total=str(item.total))
        for item in SavingsService(store).history(user_id, limit)
    ]
