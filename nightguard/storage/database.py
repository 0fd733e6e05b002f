"""SQLAlchemy-backed storage. One instance wraps one request's session."""
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.orm import Session

from nightguard.storage.base import Storage


class DatabaseStorage(Storage):
    """Every write commits immediately; there are no multi-statement transactions."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, model: Type, entity_id: int) -> Optional[Any]:
        return self.db.get(model, entity_id)

    def list(self, model: Type, **filters) -> List[Any]:
        return self.db.query(model).filter_by(**filters).order_by(model.id).all()

    def add(self, model: Type, data: Dict[str, Any]) -> Any:
        entity = model(**data)
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, model: Type, entity_id: int, data: Dict[str, Any]) -> Optional[Any]:
        entity = self.get(model, entity_id)
        if entity is None:
            return None
        for field, value in data.items():
            setattr(entity, field, value)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, model: Type, entity_id: int) -> bool:
        entity = self.get(model, entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True

    def delete_where(self, model: Type, **filters) -> int:
        count = self.db.query(model).filter_by(**filters).delete(synchronize_session=False)
        self.db.commit()
        return count

    def transition(
        self,
        model: Type,
        entity_id: int,
        expected: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Optional[Any]:
        # Single conditional UPDATE: the WHERE clause is the precondition
        count = (
            self.db.query(model)
            .filter(model.id == entity_id)
            .filter_by(**expected)
            .update(changes, synchronize_session=False)
        )
        self.db.commit()
        if not count:
            return None
        entity = self.get(model, entity_id)
        self.db.refresh(entity)
        return entity
