"""
In-memory LedgerStore

Used by the test-suite and for STORE_BACKEND=memory development runs.
A single lock serializes writes, which makes increment_field and
conditional_update atomic within the process.
"""
import copy
import threading
from decimal import Decimal
from typing import Any, Dict, List, Optional

from budgetly.infrastructure.store.base import (
    COLLECTIONS,
    UNIQUE_KEYS,
    DuplicateRecordError,
    LedgerStore,
    Predicates,
    RecordNotFoundError,
    new_record_id,
)


class InMemoryLedgerStore(LedgerStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        try:
            return self._data[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    def _check_unique(self, collection: str, record: Dict[str, Any], record_id: str) -> None:
        for fields in UNIQUE_KEYS.get(collection, []):
            values = tuple(record.get(f) for f in fields)
            if any(v is None for v in values):
                continue
            for other_id, other in self._data[collection].items():
                if other_id == record_id:
                    continue
                if tuple(other.get(f) for f in fields) == values:
                    raise DuplicateRecordError(
                        f"{collection}: duplicate {', '.join(fields)} = {values}"
                    )

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._collection(collection).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def query(self, collection: str, predicates: Predicates = ()) -> List[Dict[str, Any]]:
        predicates = list(predicates)
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._collection(collection).values()
                if all(record.get(field) == value for field, value in predicates)
            ]

    def create(self, collection: str, record: Dict[str, Any]) -> str:
        with self._lock:
            records = self._collection(collection)
            record_id = record.get("id") or new_record_id()
            if record_id in records:
                raise DuplicateRecordError(f"{collection}/{record_id} already exists")
            stored = copy.deepcopy(record)
            stored["id"] = record_id
            self._check_unique(collection, stored, record_id)
            records[record_id] = stored
            return record_id

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            records = self._collection(collection)
            if record_id not in records:
                raise RecordNotFoundError(collection, record_id)
            changed = {**records[record_id], **copy.deepcopy(fields), "id": record_id}
            self._check_unique(collection, changed, record_id)
            records[record_id] = changed

    def delete(self, collection: str, record_id: str) -> None:
        with self._lock:
            records = self._collection(collection)
            if record_id not in records:
                raise RecordNotFoundError(collection, record_id)
            del records[record_id]

    def increment_field(self, collection: str, record_id: str, field: str, delta: Decimal) -> None:
        with self._lock:
            records = self._collection(collection)
            if record_id not in records:
                raise RecordNotFoundError(collection, record_id)
            record = records[record_id]
            record[field] = (record.get(field) or Decimal("0")) + delta

    def conditional_update(
        self,
        collection: str,
        record_id: str,
        expected: Dict[str, Any],
        fields: Dict[str, Any],
    ) -> bool:
        with self._lock:
            record = self._collection(collection).get(record_id)
            if record is None:
                return False
            if any(record.get(k) != v for k, v in expected.items()):
                return False
            record.update(copy.deepcopy(fields))
            return True
