"""
Mandatory rule API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from budgetly.api.deps import get_current_user_id, get_store, require_owned
from budgetly.api.v1.schemas import AmountRequest, check_amount
from budgetly.application.rules import (
    CreateMandatoryRuleUseCase,
    DeleteMandatoryRuleUseCase,
    UpdateMandatoryRuleUseCase,
    get_active_rules,
    get_all_rules,
    get_total_mandatory_amount,
)
from budgetly.domain.mandatory_rule import MandatoryRule
from budgetly.infrastructure.store import LedgerStore, MANDATORY_RULES


router = APIRouter(prefix="/api/v1/rules", tags=["rules"])


class CreateRuleRequest(AmountRequest):
    name: str


class UpdateRuleRequest(BaseModel):
    name: str | None = None
    amount: str | None = None
    is_active: bool | None = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str | None) -> str | None:
        return check_amount(v)


class RuleResponse(BaseModel):
    rule_id: str
    name: str
    amount: str
    is_active: bool


class RulesListResponse(BaseModel):
    rules: list[RuleResponse]
    total_mandatory: str  # active rules only


def _to_response(rule: MandatoryRule) -> RuleResponse:
    return RuleResponse(rule_id=rule.id, name=rule.name, amount=str(rule.amount), is_active=rule.is_active)


@router.get("/", response_model=RulesListResponse)
def list_rules(
    include_inactive: bool = True,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    rules = get_all_rules(store, user_id) if include_inactive else get_active_rules(store, user_id)
    return RulesListResponse(
        rules=[_to_response(r) for r in rules],
        total_mandatory=str(get_total_mandatory_amount(store, user_id)),
    )


@router.post("/", response_model=RuleResponse)
def create_rule(
    req: CreateRuleRequest,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    rule_id = CreateMandatoryRuleUseCase(store).execute(user_id, req.name, req.amount)
    return _to_response(MandatoryRule.from_record(store.get(MANDATORY_RULES, rule_id)))


@router.patch("/{rule_id}", response_model=RuleResponse)
def update_rule(
    rule_id: str,
    req: UpdateRuleRequest,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    """Rename, change the amount of, or (de)activate a rule"""
    require_owned(store, MANDATORY_RULES, rule_id, user_id)
    UpdateMandatoryRuleUseCase(store).execute(
        rule_id, name=req.name, amount=req.amount, is_active=req.is_active
    )
    return _to_response(MandatoryRule.from_record(store.get(MANDATORY_RULES, rule_id)))


@router.delete("/{rule_id}")
def delete_rule(
    rule_id: str,
    user_id: str = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_store),
):
    require_owned(store, MANDATORY_RULES, rule_id, user_id)
    DeleteMandatoryRuleUseCase(store).execute(rule_id)
    return {"status": "deleted"}
