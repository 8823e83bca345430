# backend/app/services/board/tasks.py
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvariantViolation, NotFound, UnresolvableStatus, ValidationFailed
from app.models.task import PRIORITIES, Task, as_utc, utcnow
from app.services.board.activity import seed
from app.services.board.columns import list_columns
from app.services.board.mutation import apply_update
from app.services.board.status import resolve_status_key

logger = logging.getLogger(__name__)


def list_tasks(db: Session, owner_id: int) -> List[Task]:
    return (
        db.query(Task)
        .filter(Task.owner_id == owner_id)
        .order_by(Task.created_at, Task.id)
        .all()
    )


def get_task(db: Session, owner_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.owner_id == owner_id).first()
    if not task:
        raise NotFound("Task not found", field="id")
    return task


def create_task(
    db: Session,
    owner_id: int,
    title: str,
    description: Optional[str] = None,
    status: Optional[str] = None,
    due_date: Optional[datetime] = None,
    priority: Optional[str] = None,
) -> Task:
    title = (title or "").strip()
    if not title:
        raise ValidationFailed("Title is required", field="title")
    priority = priority or "medium"
    if priority not in PRIORITIES:
        raise ValidationFailed(f"Priority must be one of {', '.join(PRIORITIES)}", field="priority")

    columns = list_columns(db, owner_id)
    if not columns:
        raise InvariantViolation("Create at least one column before adding tasks")
    key = resolve_status_key(columns, status)
    if key is None:
        raise UnresolvableStatus(status)

    now = utcnow()
    task = Task(
        owner_id=owner_id,
        title=title,
        description=(description or "").strip(),
        status=key,
        priority=priority,
        due_date=as_utc(due_date),
        created_at=now,
        updated_at=now,
    )
    seed(task, now)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("TASK_CREATED task_id=%s owner_id=%s status=%s", task.id, owner_id, key)
    return task


def update_task(db: Session, owner_id: int, task_id: int, patch: Mapping[str, Any]) -> Task:
    """Apply a partial update. Writes only when at least one field really changed."""
    task = get_task(db, owner_id, task_id)
    columns = list_columns(db, owner_id) if "status" in patch else []

    appended = apply_update(task, patch, columns)
    if not appended:
        return task

    db.commit()
    db.refresh(task)
    logger.info(
        "TASK_UPDATED task_id=%s owner_id=%s changes=%s",
        task.id, owner_id, ";".join(a["message"] for a in appended),
    )
    return task


def delete_task(db: Session, owner_id: int, task_id: int) -> None:
    task = get_task(db, owner_id, task_id)
    db.delete(task)
    db.commit()
    logger.info("TASK_DELETED task_id=%s owner_id=%s", task_id, owner_id)
