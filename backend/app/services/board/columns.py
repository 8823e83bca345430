# backend/app/services/board/columns.py
"""
Column lifecycle: create, onboarding, rename, reorder and delete-with-migration.

Keys are derived from labels once and never change. Uniqueness of
(owner, key) is enforced by the database; a collision caused by a
concurrent creator is retried with a freshly derived key.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, InvariantViolation, NotFound, ValidationFailed
from app.models.column import BoardColumn
from app.models.task import Task, utcnow
from app.services.board.activity import make_activity, record
from app.services.board.status import ensure_unique_key, resolve_column, slugify

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 80
MIN_ONBOARDING_COLUMNS = 3
KEY_RETRIES = 5


def _clean_label(label: Optional[str]) -> str:
    label = (label or "").strip()
    if not label:
        raise ValidationFailed("Label is required", field="label")
    if len(label) > MAX_LABEL_LENGTH:
        raise ValidationFailed(f"Label must be at most {MAX_LABEL_LENGTH} characters", field="label")
    return label


def list_columns(db: Session, owner_id: int) -> List[BoardColumn]:
    return (
        db.query(BoardColumn)
        .filter(BoardColumn.owner_id == owner_id)
        .order_by(BoardColumn.position, BoardColumn.id)
        .all()
    )


def _next_position(db: Session, owner_id: int) -> int:
    current = (
        db.query(func.max(BoardColumn.position))
        .filter(BoardColumn.owner_id == owner_id)
        .scalar()
    )
    return 0 if current is None else current + 1


def _owner_keys(db: Session, owner_id: int) -> set:
    return {
        key for (key,) in db.query(BoardColumn.key).filter(BoardColumn.owner_id == owner_id)
    }


def create_column(db: Session, owner_id: int, label: str) -> BoardColumn:
    label = _clean_label(label)
    base = slugify(label)

    for attempt in range(1, KEY_RETRIES + 1):
        key = ensure_unique_key(base, _owner_keys(db, owner_id))
        column = BoardColumn(
            owner_id=owner_id,
            key=key,
            label=label,
            position=_next_position(db, owner_id),
        )
        db.add(column)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "COLUMN_KEY_COLLISION owner_id=%s key=%s attempt=%s",
                owner_id, key, attempt,
            )
            continue
        db.refresh(column)
        logger.info("COLUMN_CREATED owner_id=%s key=%s label=%r", owner_id, column.key, label)
        return column

    raise Conflict(f"Could not derive a unique key for '{label}'", field="label")


def bootstrap_columns(db: Session, owner_id: int, labels: Sequence[str]) -> List[BoardColumn]:
    """First-run onboarding: create the starting columns in one go, in the given order."""
    cleaned = [label.strip() for label in labels if label and label.strip()]
    if len(cleaned) < MIN_ONBOARDING_COLUMNS:
        raise ValidationFailed(
            f"Add at least {MIN_ONBOARDING_COLUMNS} column names.", field="labels"
        )
    if list_columns(db, owner_id):
        raise Conflict("Board is already set up")

    taken: set = set()
    created = []
    for position, label in enumerate(cleaned):
        label = _clean_label(label)
        key = ensure_unique_key(slugify(label), taken)
        taken.add(key)
        column = BoardColumn(owner_id=owner_id, key=key, label=label, position=position)
        db.add(column)
        created.append(column)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Board is already set up")

    for column in created:
        db.refresh(column)
    logger.info(
        "COLUMNS_BOOTSTRAPPED owner_id=%s keys=%s", owner_id, ",".join(c.key for c in created)
    )
    return created


def find_column(columns: Sequence[BoardColumn], key_or_label: str) -> Optional[BoardColumn]:
    """Key first, then a case-insensitive label match."""
    for column in columns:
        if column.key == key_or_label:
            return column
    wanted = (key_or_label or "").strip().lower()
    for column in columns:
        if column.label.strip().lower() == wanted:
            return column
    return None


def rename_column(db: Session, owner_id: int, key: str, label: str) -> BoardColumn:
    label = _clean_label(label)
    column = find_column(list_columns(db, owner_id), key)
    if column is None:
        raise NotFound("Column not found", field="key")

    column.label = label
    db.commit()
    db.refresh(column)
    logger.info("COLUMN_RENAMED owner_id=%s key=%s label=%r", owner_id, column.key, label)
    return column


def delete_column(
    db: Session, owner_id: int, key: str, migrate_to: Optional[str] = None
) -> BoardColumn:
    """
    Remove a column, moving its tasks to the migration target first.

    The status rewrite and the column removal share one transaction, so a
    failure leaves both the column and its tasks as they were.
    """
    columns = list_columns(db, owner_id)
    column = find_column(columns, key)
    if column is None:
        raise NotFound("Column not found", field="key")
    if len(columns) <= 1:
        raise InvariantViolation("At least one column is required")

    deleted_key = column.key
    remaining = [c for c in columns if c.id != column.id]
    # Blank means "not given", not "first column"
    migrate_to = (migrate_to or "").strip()
    if migrate_to:
        target = find_column(columns, migrate_to) or resolve_column(columns, migrate_to)
        if target is None:
            raise InvariantViolation(f"Migration target '{migrate_to}' does not exist", field="migrateTo")
        if target.id == column.id:
            raise InvariantViolation("Cannot migrate tasks into the column being deleted", field="migrateTo")
    else:
        target = remaining[0]

    tasks = (
        db.query(Task)
        .filter(Task.owner_id == owner_id, Task.status == deleted_key)
        .all()
    )
    try:
        now = utcnow()
        for task in tasks:
            task.status = target.key
            task.updated_at = now
            record(task, make_activity("status", f"Moved to {target.label}", now))
        db.flush()
        db.delete(column)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("COLUMN_DELETE_FAILED owner_id=%s key=%s", owner_id, deleted_key)
        raise

    logger.info(
        "COLUMN_DELETED owner_id=%s key=%s migrated_to=%s tasks=%s",
        owner_id, deleted_key, target.key, len(tasks),
    )
    return target


def reorder_columns(db: Session, owner_id: int, keys: Sequence[str]) -> List[BoardColumn]:
    """Persist a user-chosen left-to-right order. `keys` must name every column exactly once."""
    columns = list_columns(db, owner_id)
    by_key = {c.key: c for c in columns}
    if len(keys) != len(columns) or set(keys) != set(by_key):
        raise ValidationFailed("Order must list every column key exactly once", field="keys")

    for position, key in enumerate(keys):
        by_key[key].position = position
    db.commit()
    logger.info("COLUMNS_REORDERED owner_id=%s keys=%s", owner_id, ",".join(keys))
    return list_columns(db, owner_id)


def move_column(db: Session, owner_id: int, key: str, direction: str) -> List[BoardColumn]:
    """Swap a column with its left or right neighbour. No-op at the board edge."""
    if direction not in ("left", "right"):
        raise ValidationFailed("Direction must be 'left' or 'right'", field="direction")
    columns = list_columns(db, owner_id)
    column = find_column(columns, key)
    if column is None:
        raise NotFound("Column not found", field="key")

    index = columns.index(column)
    neighbour = index - 1 if direction == "left" else index + 1
    if neighbour < 0 or neighbour >= len(columns):
        return columns

    keys = [c.key for c in columns]
    keys[index], keys[neighbour] = keys[neighbour], keys[index]
    return reorder_columns(db, owner_id, keys)
