"""
SQLAlchemy-backed LedgerStore

Each collection maps to one ORM model whose column names equal the record
keys. Every write is committed immediately (single-record atomicity);
increments and compare-and-set are single UPDATE statements evaluated by
the database, so concurrent writers never lose an update.
"""
import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import select, insert, update, delete
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from budgetly.infrastructure.db.models import (
    UserMarkerModel,
    MonthlyIncomeModel,
    MandatoryRuleModel,
    CategoryModel,
    ExpenseModel,
    SavingsEntryModel,
)
from budgetly.infrastructure.db.session import Base
from budgetly.infrastructure.store.base import (
    USERS,
    MONTHLY_INCOME,
    MANDATORY_RULES,
    CATEGORIES,
    EXPENSES,
    SAVINGS,
    DuplicateRecordError,
    LedgerStore,
    Predicates,
    RecordNotFoundError,
    StoreUnavailableError,
    new_record_id,
)

logger = logging.getLogger(__name__)

_MODELS: Dict[str, Type[Base]] = {
    USERS: UserMarkerModel,
    MONTHLY_INCOME: MonthlyIncomeModel,
    MANDATORY_RULES: MandatoryRuleModel,
    CATEGORIES: CategoryModel,
    EXPENSES: ExpenseModel,
    SAVINGS: SavingsEntryModel,
}


def _to_record(row: Base) -> Dict[str, Any]:
    return {col.key: getattr(row, col.key) for col in row.__table__.columns}


class SqlAlchemyLedgerStore(LedgerStore):
    """
    LedgerStore over a SQLAlchemy session

    Usage:
        >>> store = SqlAlchemyLedgerStore(db)
        >>> rule_id = store.create("mandatory_rules", {...})
    """

    def __init__(self, db: Session):
        self.db = db

    def _model(self, collection: str) -> Type[Base]:
        try:
            return _MODELS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    @contextmanager
    def _guard(self, collection: str):
        """Translate driver errors into store errors, rolling back the session."""
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateRecordError(f"{collection}: {e.orig}") from e
        except DBAPIError as e:
            self.db.rollback()
            logger.error("Ledger store I/O failure on %s: %s", collection, e)
            raise StoreUnavailableError(str(e)) from e

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        model = self._model(collection)
        with self._guard(collection):
            row = self.db.execute(select(model).where(model.id == record_id)).scalar_one_or_none()
            return _to_record(row) if row is not None else None

    def query(self, collection: str, predicates: Predicates = ()) -> List[Dict[str, Any]]:
        model = self._model(collection)
        stmt = select(model)
        for field, value in predicates:
            stmt = stmt.where(getattr(model, field) == value)
        with self._guard(collection):
            return [_to_record(row) for row in self.db.execute(stmt).scalars().all()]

    def create(self, collection: str, record: Dict[str, Any]) -> str:
        model = self._model(collection)
        record_id = record.get("id") or new_record_id()
        with self._guard(collection):
            self.db.execute(insert(model).values(**{**record, "id": record_id}))
            self.db.commit()
        return record_id

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        model = self._model(collection)
        with self._guard(collection):
            result = self.db.execute(
                update(model).where(model.id == record_id).values(**fields)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise RecordNotFoundError(collection, record_id)
            self.db.commit()

    def delete(self, collection: str, record_id: str) -> None:
        model = self._model(collection)
        with self._guard(collection):
            result = self.db.execute(delete(model).where(model.id == record_id))
            if result.rowcount == 0:
                self.db.rollback()
                raise RecordNotFoundError(collection, record_id)
            self.db.commit()

    def increment_field(self, collection: str, record_id: str, field: str, delta: Decimal) -> None:
        model = self._model(collection)
        column = getattr(model, field)
        with self._guard(collection):
            # UPDATE ... SET field = field + :delta (evaluated by the database)
            result = self.db.execute(
                update(model)
                .where(model.id == record_id)
                .values({column: column + delta})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise RecordNotFoundError(collection, record_id)
            self.db.commit()

    def conditional_update(
        self,
        collection: str,
        record_id: str,
        expected: Dict[str, Any],
        fields: Dict[str, Any],
    ) -> bool:
        model = self._model(collection)
        conditions = [model.id == record_id]
        conditions.extend(getattr(model, key) == value for key, value in expected.items())
        with self._guard(collection):
            result = self.db.execute(
                update(model)
                .where(*conditions)
                .values(**fields)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        return result.rowcount == 1
