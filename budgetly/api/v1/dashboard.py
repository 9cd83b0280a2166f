"""
Dashboard API endpoint - everything the month screen needs in one call
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from budgetly.api.deps import get_current_month, get_current_user_id, get_store
from budgetly.api.v1.schemas import SavingsBreakdownResponse
from budgetly.application.dashboard import DashboardService
from budgetly.config import get_settings
from budgetly.infrastructure.store import LedgerStore
from budgetly.utils.money import format_money


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


class CategoryUsageResponse(BaseModel):
    category_id: str
    name: str
    budgeted: str
    spent: str
    remaining: str
    percentage: int
    is_overspent: bool


class InsightsResponse(BaseModel):
    spent_percentage: int
    saved_percentage: int
    remaining: str
    top_category: str | None
    top_category_spent: str


class DashboardResponse(BaseModel):
    month: str
    month_label: str
    income: str
    income_display: str
    mandatory_total: str
    available_balance: str
    can_add_expense: bool
    total_budgeted: str
    total_spent: str
    remaining: str
    categories: list[CategoryUsageResponse]
    month_savings: str
    savings_breakdown: SavingsBreakdownResponse
    insights: InsightsResponse


@router.get("/", response_model=DashboardResponse)
def dashboard(
    month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    view = DashboardService(store).overview(user_id, month)
    symbol = get_settings().CURRENCY_SYMBOL
    return DashboardResponse(
        month=view.month,
        month_label=view.month_label,
        income=str(view.income),
        income_display=format_money(view.income, symbol),
        mandatory_total=str(view.mandatory_total),
        available_balance=str(view.available_balance),
        can_add_expense=view.can_add_expense,
        total_budgeted=str(view.categories.total_budgeted),
        total_spent=str(view.categories.total_spent),
        remaining=str(view.categories.remaining),
        categories=[
            CategoryUsageResponse(
                category_id=u.category_id,
                name=u.name,
                budgeted=str(u.budgeted),
                spent=str(u.spent),
                remaining=str(u.remaining),
                percentage=u.percentage,
                is_overspent=u.is_overspent,
            )
            for u in view.category_usage
        ],
        month_savings=str(view.month_savings),
        savings_breakdown=SavingsBreakdownResponse(
            mandatory=str(view.savings_breakdown.mandatory),
            leftover=str(view.savings_breakdown.leftover),
            total=str(view.savings_breakdown.total),
        ),
        insights=InsightsResponse(
            spent_percentage=view.insights.spent_percentage,
            saved_percentage=view.insights.saved_percentage,
            remaining=str(view.insights.remaining),
            top_category=view.insights.top_category,
            top_category_spent=str(view.insights.top_category_spent),
        ),
    )
