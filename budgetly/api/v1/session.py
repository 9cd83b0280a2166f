"""
Session API - onboarding seed and session-start month rollover
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from budgetly.api.deps import get_current_user_id, get_rollover_engine
from budgetly.application.rollover import MonthRolloverEngine


router = APIRouter(prefix="/api/v1/session", tags=["session"])


class InitializeRequest(BaseModel):
    email: str


class RolloverResponse(BaseModel):
    from_month: str | None
    to_month: str
    performed: bool
    entries_created: int
    skipped_months: int


class SessionResponse(BaseModel):
    current_month: str
    rollover: RolloverResponse | None = None


@router.post("/initialize", response_model=SessionResponse)
def initialize(
    req: InitializeRequest,
    user_id: str = Depends(get_current_user_id),
    engine: MonthRolloverEngine = Depends(get_rollover_engine),
):
    """Seed the user's current month after signup (no-op if already seeded)"""
    engine.initialize_user(user_id, req.email)
    return SessionResponse(current_month=engine.get_marker(user_id).current_month)


@router.post("/start", response_model=SessionResponse)
def start_session(
    user_id: str = Depends(get_current_user_id),
    engine: MonthRolloverEngine = Depends(get_rollover_engine),
):
    """Run the month rollover if the user's month is behind the real month"""
    result = engine.start_session(user_id)
    marker = engine.get_marker(user_id)
    current_month = marker.current_month if marker else str(engine.current_month())

    rollover = None
    if result is not None:
        rollover = RolloverResponse(
            from_month=result.from_month,
            to_month=result.to_month,
            performed=result.performed,
            entries_created=result.entries_created,
            skipped_months=result.skipped_months,
        )
    return SessionResponse(current_month=current_month, rollover=rollover)
