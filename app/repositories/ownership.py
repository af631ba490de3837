"""
Ownership-scoped mutation. Match by id AND owner in the same statement that mutates, so the
existence check and the ownership check cannot be told apart: both fail as one NotFound.
"""
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.core.errors import NotFound


def not_found_or_forbidden(label: str) -> NotFound:
    return NotFound(f"{label} not found or you are not the owner")


def update_if_owner(
    db: Session,
    model: Any,
    resource_id: str,
    actor_id: str,
    values: dict,
    *,
    label: str = "Resource",
    owner_column: str = "owner_id",
):
    """UPDATE ... WHERE id AND owner. Values may be SQL expressions. Returns the refreshed row object."""
    updated = (
        db.query(model)
        .filter(model.id == resource_id, getattr(model, owner_column) == actor_id)
        .update(values, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise not_found_or_forbidden(label)
    db.commit()
    return db.get(model, resource_id, populate_existing=True)


def find_owned(db: Session, model: Any, resource_id: str, actor_id: str, *, label: str = "Resource",
               owner_column: str = "owner_id"):
    """Read-only variant for multi-step flows (e.g. upload before update); same masking."""
    item = (
        db.query(model)
        .filter(model.id == resource_id, getattr(model, owner_column) == actor_id)
        .first()
    )
    if item is None:
        raise not_found_or_forbidden(label)
    return item


def delete_if_owner(
    db: Session,
    model: Any,
    resource_id: str,
    actor_id: str,
    *,
    label: str = "Resource",
    owner_column: str = "owner_id",
    cascade: Callable[[Session, dict], None] | None = None,
) -> dict:
    """
    DELETE ... WHERE id AND owner RETURNING *. `cascade` runs in the same transaction
    before commit. Returns the deleted row's values.
    """
    table = model.__table__
    stmt = (
        table.delete()
        .where(table.c.id == resource_id, table.c[owner_column] == actor_id)
        .returning(*table.c)
    )
    row = db.execute(stmt).first()
    if row is None:
        db.rollback()
        raise not_found_or_forbidden(label)
    deleted = dict(row._mapping)
    if cascade is not None:
        cascade(db, deleted)
    db.commit()
    return deleted
