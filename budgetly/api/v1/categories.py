"""
Category API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from budgetly.api.deps import get_current_month, get_current_user_id, get_store, require_owned
from budgetly.api.v1.schemas import check_amount, validate_month_field
from budgetly.application.categories import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    SetupMonthCategoriesUseCase,
    UpdateCategoryUseCase,
    get_category_overview,
)
from budgetly.domain.category import Category, DEFAULT_CATEGORIES
from budgetly.infrastructure.store import LedgerStore, CATEGORIES


router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


class CreateCategoryRequest(BaseModel):
    name: str
    budgeted: str  # Decimal as string
    month: str | None = None

    @field_validator("budgeted")
    @classmethod
    def validate_budgeted(cls, v: str) -> str:
        return check_amount(v)

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str | None) -> str | None:
        return validate_month_field(v)


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    budgeted: str | None = None

    @field_validator("budgeted")
    @classmethod
    def validate_budgeted(cls, v: str | None) -> str | None:
        return check_amount(v)


class SetupCategoriesRequest(BaseModel):
    budgets: dict[str, str]  # name -> budget, empty strings skipped
    month: str | None = None

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str | None) -> str | None:
        return validate_month_field(v)


class CategoryResponse(BaseModel):
    category_id: str
    month: str
    name: str
    budgeted: str
    spent: str
    remaining: str
    is_overspent: bool


class CategoryOverviewResponse(BaseModel):
    month: str
    total_budgeted: str
    total_spent: str
    remaining: str
    categories: list[CategoryResponse]


def _to_response(c: Category) -> CategoryResponse:
    return CategoryResponse(
        category_id=c.id,
        month=c.month,
        name=c.name,
        budgeted=str(c.budgeted),
        spent=str(c.spent),
        remaining=str(c.remaining),
        is_overspent=c.is_overspent,
    )


@router.get("/defaults", response_model=list[str])
def default_categories():
    """Category names offered during onboarding"""
    return DEFAULT_CATEGORIES


@router.get("/", response_model=CategoryOverviewResponse)
def list_categories(
    month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Categories of a month with totals"""
    overview = get_category_overview(store, user_id, month)
    return CategoryOverviewResponse(
        month=month,
        total_budgeted=str(overview.total_budgeted),
        total_spent=str(overview.total_spent),
        remaining=str(overview.remaining),
        categories=[_to_response(c) for c in overview.categories],
    )


@router.post("/", response_model=CategoryResponse)
def create_category(
    req: CreateCategoryRequest,
    current_month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    category_id = CreateCategoryUseCase(store).execute(
        user_id, req.month or current_month, req.name, req.budgeted
    )
    return _to_response(Category.from_record(store.get(CATEGORIES, category_id)))


@router.post("/setup", response_model=list[CategoryResponse])
def setup_categories(
    req: SetupCategoriesRequest,
    current_month: str = Depends(get_current_month),
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Onboarding: allocate the available balance across categories"""
    ids = SetupMonthCategoriesUseCase(store).execute(user_id, req.month or current_month, req.budgets)
    return [_to_response(Category.from_record(store.get(CATEGORIES, i))) for i in ids]


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    req: UpdateCategoryRequest,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    require_owned(store, CATEGORIES, category_id, user_id)
    UpdateCategoryUseCase(store).execute(category_id, name=req.name, budgeted=req.budgeted)
    return _to_response(Category.from_record(store.get(CATEGORIES, category_id)))


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    require_owned(store, CATEGORIES, category_id, user_id)
    DeleteCategoryUseCase(store).execute(category_id)
    return {"status": "deleted"}
