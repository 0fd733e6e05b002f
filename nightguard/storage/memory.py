"""
In-memory storage for development and tests.

Rows are transient instances of the same SQLAlchemy model classes the
database backend returns, so API schemas serialize both identically.
"""
import itertools
import threading
from typing import Any, Dict, Iterator, List, Optional, Type

from nightguard.storage.base import Storage


def _column_defaults(model: Type, data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill unset columns from their Column(default=...) like an INSERT would."""
    row = {}
    for column in model.__table__.columns:
        if column.key in data:
            row[column.key] = data[column.key]
        elif column.default is not None and column.default.is_callable:
            row[column.key] = column.default.arg(None)
        elif column.default is not None and column.default.is_scalar:
            row[column.key] = column.default.arg
        else:
            row[column.key] = None
    return row


class MemStorage(Storage):
    """
    Process-local tables keyed by id.

    One lock serializes every mutation. Each table owns its own id counter,
    so ids start at 1 per table like autoincrement columns do.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._tables: Dict[Type, Dict[int, Any]] = {}
        self._counters: Dict[Type, Iterator[int]] = {}

    def _table(self, model: Type) -> Dict[int, Any]:
        if model not in self._tables:
            self._tables[model] = {}
            self._counters[model] = itertools.count(1)
        return self._tables[model]

    @staticmethod
    def _matches(entity: Any, filters: Dict[str, Any]) -> bool:
        return all(getattr(entity, field) == value for field, value in filters.items())

    def get(self, model: Type, entity_id: int) -> Optional[Any]:
        with self._lock:
            return self._table(model).get(entity_id)

    def list(self, model: Type, **filters) -> List[Any]:
        with self._lock:
            # dicts keep insertion order, which is id order here
            return [entity for entity in self._table(model).values() if self._matches(entity, filters)]

    def add(self, model: Type, data: Dict[str, Any]) -> Any:
        with self._lock:
            table = self._table(model)
            row = _column_defaults(model, data)
            row["id"] = next(self._counters[model])
            entity = model(**row)
            table[entity.id] = entity
            return entity

    def update(self, model: Type, entity_id: int, data: Dict[str, Any]) -> Optional[Any]:
        with self._lock:
            entity = self._table(model).get(entity_id)
            if entity is None:
                return None
            for field, value in data.items():
                setattr(entity, field, value)
            return entity

    def delete(self, model: Type, entity_id: int) -> bool:
        with self._lock:
            return self._table(model).pop(entity_id, None) is not None

    def delete_where(self, model: Type, **filters) -> int:
        with self._lock:
            table = self._table(model)
            doomed = [entity_id for entity_id, entity in table.items() if self._matches(entity, filters)]
            for entity_id in doomed:
                del table[entity_id]
            return len(doomed)

    def transition(
        self,
        model: Type,
        entity_id: int,
        expected: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Optional[Any]:
        with self._lock:
            entity = self._table(model).get(entity_id)
            if entity is None or not self._matches(entity, expected):
                return None
            for field, value in changes.items():
                setattr(entity, field, value)
            return entity
