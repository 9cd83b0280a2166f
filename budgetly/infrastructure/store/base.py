"""
LedgerStore - narrow document-store interface

Records are plain dicts keyed by field name and always carry "id".
Every write is atomic for a single record; nothing spans records.
"""
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple


# Collections
USERS = "users"
MONTHLY_INCOME = "monthly_income"
MANDATORY_RULES = "mandatory_rules"
CATEGORIES = "categories"
EXPENSES = "expenses"
SAVINGS = "savings"

COLLECTIONS = (USERS, MONTHLY_INCOME, MANDATORY_RULES, CATEGORIES, EXPENSES, SAVINGS)

# Field tuples that must be unique per collection (None values are not compared)
UNIQUE_KEYS: Dict[str, List[Tuple[str, ...]]] = {
    MONTHLY_INCOME: [("user_id", "month")],
    SAVINGS: [("idempotency_key",)],
}

Predicates = Iterable[Tuple[str, Any]]


class StoreError(Exception):
    """Base class for ledger store failures"""
    pass


class StoreUnavailableError(StoreError):
    """Transient I/O failure - the caller may retry"""
    pass


class RecordNotFoundError(StoreError):
    """Write addressed a record id that does not exist"""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}/{record_id} not found")
        self.collection = collection
        self.record_id = record_id


class DuplicateRecordError(StoreError):
    """A uniqueness constraint rejected the write"""
    pass


def new_record_id() -> str:
    return uuid.uuid4().hex


class LedgerStore(ABC):
    """
    Document collection with per-record CRUD and equality-filtered queries

    Implementations:
    - SqlAlchemyLedgerStore (PostgreSQL / SQLite)
    - InMemoryLedgerStore (tests, local development)
    """

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Read one record

        Returns:
            Record dict or None if absent
        """

    @abstractmethod
    def query(self, collection: str, predicates: Predicates = ()) -> List[Dict[str, Any]]:
        """
        All records matching every (field, value) equality predicate

        Order is unspecified; callers sort.
        """

    @abstractmethod
    def create(self, collection: str, record: Dict[str, Any]) -> str:
        """
        Insert a record

        Uses record["id"] when present, otherwise generates one.

        Returns:
            id of the created record

        Raises:
            DuplicateRecordError: id or a unique key already taken
        """

    @abstractmethod
    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        """
        Overwrite the given fields of one record

        Raises:
            RecordNotFoundError: no such record
        """

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        """
        Remove one record

        Raises:
            RecordNotFoundError: no such record
        """

    @abstractmethod
    def increment_field(self, collection: str, record_id: str, field: str, delta: Decimal) -> None:
        """
        Add delta to a numeric field, atomically w.r.t. concurrent increments

        Raises:
            RecordNotFoundError: no such record
        """

    @abstractmethod
    def conditional_update(
        self,
        collection: str,
        record_id: str,
        expected: Dict[str, Any],
        fields: Dict[str, Any],
    ) -> bool:
        """
        Compare-and-set: apply fields only if every expected field still holds

        Returns:
            True if the write was applied, False if the record is missing or
            any expected value differs
        """
