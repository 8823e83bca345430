# backend/app/services/board/activity.py
from datetime import datetime
from sqlalchemy.orm.attributes import flag_modified
from app.models.task import Task, as_utc

ACTIVITY_KINDS = ("create", "update", "status")


def make_activity(kind: str, message: str, at: datetime) -> dict:
    if kind not in ACTIVITY_KINDS:
        raise ValueError(f"Unknown activity kind '{kind}'")
    return {
        "type": kind,
        "message": message,
        "at": as_utc(at).isoformat().replace("+00:00", "Z"),
    }


def record(task: Task, activity: dict) -> dict:
    """Append one entry to the task's log. Existing entries are never touched."""
    log = list(task.activities or [])
    log.append(activity)
    task.activities = log
    flag_modified(task, "activities")
    return activity


def seed(task: Task, at: datetime) -> dict:
    """Every task starts with exactly one 'create' entry."""
    task.activities = []
    return record(task, make_activity("create", "Task created", at))
