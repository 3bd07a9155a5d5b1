"""Helpers shared by the domain services."""

from typing import Any, Dict, Type, TypeVar

from sqlalchemy.orm import Session

from cafe.core.errors import NotFoundError, ValidationError

T = TypeVar("T")


def build(model: Type[T], fields: Dict[str, Any]) -> T:
    """Instantiate *model*, surfacing model-level validation as a 400."""
    try:
        return model(**fields)
    except ValueError as e:
        raise ValidationError(str(e))


def apply_changes(instance: Any, changes: Dict[str, Any]) -> None:
    """Merge a partial update over *instance*.

    Keys absent from *changes* keep their value. An explicit null on a
    NOT NULL column is ignored rather than written.
    """
    columns = instance.__table__.c
    for key, value in changes.items():
        if value is None and key in columns and not columns[key].nullable:
            continue
        try:
            setattr(instance, key, value)
        except ValueError as e:
            raise ValidationError(str(e))


def get_or_404(db: Session, model: Type[T], record_id: int, entity: str) -> T:
    instance = db.get(model, record_id)
    if instance is None:
        raise NotFoundError(entity)
    return instance
