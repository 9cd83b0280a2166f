"""
FastAPI dependencies (ledger store, current user)
"""
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, Request, HTTPException

from budgetly.application.errors import LedgerValidationError, NotAuthenticatedError
from budgetly.application.rollover import MonthRolloverEngine
from budgetly.config import get_settings
from budgetly.domain.month import is_valid_month
from budgetly.infrastructure.db.session import get_session_factory
from budgetly.infrastructure.store import LedgerStore, InMemoryLedgerStore, SqlAlchemyLedgerStore


@lru_cache
def get_memory_store() -> InMemoryLedgerStore:
    """Process-wide in-memory store (STORE_BACKEND=memory)"""
    return InMemoryLedgerStore()


def get_store() -> Iterator[LedgerStore]:
    """
    Ledger store for one request

    Usage:
        @router.get("/rules")
        def list_rules(store: LedgerStore = Depends(get_store)):
            ...
    """
    if get_settings().STORE_BACKEND == "memory":
        yield get_memory_store()
        return

    db = get_session_factory()()
    try:
        yield SqlAlchemyLedgerStore(db)
    finally:
        db.close()


def get_current_user_id(request: Request) -> str:
    """
    User id from the session (set by the authentication layer)

    Raises:
        NotAuthenticatedError: no user in session (mapped to HTTP 401)
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise NotAuthenticatedError("Not authenticated")
    return str(user_id)


def get_rollover_engine(store: LedgerStore = Depends(get_store)) -> MonthRolloverEngine:
    return MonthRolloverEngine(store)


def get_current_month(
    month: str | None = None,
    user_id: str = Depends(get_current_user_id),
    engine: MonthRolloverEngine = Depends(get_rollover_engine),
) -> str:
    """
    Month a request operates on

    Explicit ?month= wins; otherwise the user's marker month, falling back
    to the real month for users without a marker.
    """
    if month is not None:
        if not is_valid_month(month):
            raise LedgerValidationError(f"month must be YYYY-MM, got: {month}")
        return month
    marker = engine.get_marker(user_id)
    if marker is None:
        return str(engine.current_month())
    return marker.current_month


def require_owned(store: LedgerStore, collection: str, record_id: str, user_id: str) -> dict:
    """Load a record that must belong to the user (404 otherwise)"""
    record = store.get(collection, record_id)
    if record is None or record.get("user_id") != user_id:
        raise HTTPException(status_code=404, detail="Not found")
    return record
