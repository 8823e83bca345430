# backend/app/services/board/mutation.py
"""
Field-by-field task updates.

`apply_update` walks FIELD_RULES in order. For every field present in the
patch it asks the rule whether the value really changed; if so it applies
the new value and records one activity. Rule order is the order entries
appear in the task's activity log, so it must not be rearranged.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from app.core.errors import UnresolvableStatus, ValidationFailed
from app.models.column import BoardColumn
from app.models.task import PRIORITIES, Task, as_utc, utcnow
from app.services.board.activity import make_activity, record
from app.services.board.status import resolve_column

UPDATABLE_FIELDS = ("title", "description", "status", "priority", "due_date")


@dataclass(frozen=True)
class FieldRule:
    field: str
    kind: str
    changed: Callable[[Any, Any], bool]
    message: Callable[[Any, "_Context"], str]


@dataclass
class _Context:
    columns: Sequence[BoardColumn]
    status_column: Optional[BoardColumn] = None


def _text_changed(old, new) -> bool:
    return (new or "") != (old or "")


def _due_changed(old, new) -> bool:
    return as_utc(old) != as_utc(new)


def _due_message(value: Optional[datetime], _ctx: _Context) -> str:
    if value is None:
        return "Due date cleared"
    return f"Due date set to {as_utc(value).strftime('%Y-%m-%d')}"


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("title", "update", lambda old, new: new != old, lambda _v, _c: "Title updated"),
    FieldRule("description", "update", _text_changed, lambda _v, _c: "Description updated"),
    FieldRule("status", "status", lambda old, new: new != old,
              lambda _v, ctx: f"Moved to {ctx.status_column.label}"),
    FieldRule("priority", "update", lambda old, new: new != old,
              lambda value, _c: f"Priority set to {value}"),
    FieldRule("due_date", "update", _due_changed, _due_message),
)


def _prepare(patch: Mapping[str, Any], ctx: _Context) -> dict:
    """Validate and normalise every present field before anything is applied."""
    values = {}
    for field, value in patch.items():
        if field not in UPDATABLE_FIELDS:
            continue
        if field == "title":
            value = (value or "").strip()
            if not value:
                raise ValidationFailed("Title is required", field="title")
        elif field == "description":
            value = (value or "").strip()
        elif field == "status":
            column = resolve_column(ctx.columns, value)
            if column is None:
                raise UnresolvableStatus(value)
            ctx.status_column = column
            value = column.key
        elif field == "priority":
            if value not in PRIORITIES:
                raise ValidationFailed(
                    f"Priority must be one of {', '.join(PRIORITIES)}", field="priority"
                )
        elif field == "due_date":
            value = as_utc(value)
        values[field] = value
    return values


def apply_update(
    task: Task,
    patch: Mapping[str, Any],
    columns: Sequence[BoardColumn],
    clock: Callable[[], datetime] = utcnow,
) -> list[dict]:
    """
    Apply the fields present in `patch` to `task`.

    Returns the activities appended (empty when nothing changed). Raises
    ValidationFailed / UnresolvableStatus without touching the task when
    any present field is invalid.
    """
    ctx = _Context(columns=columns)
    values = _prepare(patch, ctx)
    if not values:
        raise ValidationFailed("At least one field must be provided")

    appended = []
    for rule in FIELD_RULES:
        if rule.field not in values:
            continue
        new = values[rule.field]
        if not rule.changed(getattr(task, rule.field), new):
            continue
        setattr(task, rule.field, new)
        appended.append(record(task, make_activity(rule.kind, rule.message(new, ctx), clock())))

    if appended:
        task.updated_at = clock()
    return appended
