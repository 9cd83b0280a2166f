"""
Expense API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from budgetly.api.deps import get_current_month, get_current_user_id, get_store, require_owned
from budgetly.api.v1.schemas import MonthAmountRequest
from budgetly.application.expenses import (
    RecordExpenseUseCase,
    RemoveExpenseUseCase,
    get_category_expenses,
    get_month_expenses,
    get_recent_expenses,
)
from budgetly.domain.expense import Expense
from budgetly.infrastructure.store import LedgerStore, CATEGORIES, EXPENSES


router = APIRouter(prefix="/api/v1/expenses", tags=["expenses"])


class CreateExpenseRequest(MonthAmountRequest):
    category_id: str
    note: str = ""
    date: datetime | None = None


class ExpenseResponse(BaseModel):
    expense_id: str
    month: str
    category_id: str
    amount: str
    note: str
    date: datetime | None = None


def _to_response(e: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        expense_id=e.id,
        month=e.month,
        category_id=e.category_id,
        amount=str(e.amount),
        note=e.note,
        date=e.date,
    )


@router.get("/", response_model=list[ExpenseResponse])
def list_expenses(
    category_id: str | None = None,
    limit: int | None = None,
    month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Expenses of a month (newest first), or of one category when category_id is given"""
    if category_id:
        expenses = get_category_expenses(store, user_id, category_id)
    elif limit is not None:
        expenses = get_recent_expenses(store, user_id, month, limit)
    else:
        expenses = get_month_expenses(store, user_id, month)
    return [_to_response(e) for e in expenses]


@router.post("/", response_model=ExpenseResponse)
def create_expense(
    req: CreateExpenseRequest,
    current_month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Record an expense (overspending a category is allowed)"""
    require_owned(store, CATEGORIES, req.category_id, user_id)
    expense_id = RecordExpenseUseCase(store).execute(
        user_id,
        req.month or current_month,
        req.category_id,
        req.amount,
        note=req.note,
        spent_on=req.date,
    )
    return _to_response(Expense.from_record(store.get(EXPENSES, expense_id)))


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    # Capture category and amount before the record is gone
    expense = Expense.from_record(require_owned(store, EXPENSES, expense_id, user_id))
    RemoveExpenseUseCase(store).execute(expense.id, expense.category_id, expense.amount)
    return {"status": "deleted"}
