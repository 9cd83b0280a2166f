"""
Ledger store - document-collection abstraction consumed by the use cases
"""
from budgetly.infrastructure.store.base import (
    LedgerStore,
    StoreError,
    StoreUnavailableError,
    RecordNotFoundError,
    DuplicateRecordError,
    USERS,
    MONTHLY_INCOME,
    MANDATORY_RULES,
    CATEGORIES,
    EXPENSES,
    SAVINGS,
    COLLECTIONS,
    UNIQUE_KEYS,
)
from budgetly.infrastructure.store.memory import InMemoryLedgerStore
from budgetly.infrastructure.store.sqlalchemy_store import SqlAlchemyLedgerStore

__all__ = [
    "LedgerStore",
    "StoreError",
    "StoreUnavailableError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "InMemoryLedgerStore",
    "SqlAlchemyLedgerStore",
    "USERS",
    "MONTHLY_INCOME",
    "MANDATORY_RULES",
    "CATEGORIES",
    "EXPENSES",
    "SAVINGS",
    "COLLECTIONS",
    "UNIQUE_KEYS",
]
