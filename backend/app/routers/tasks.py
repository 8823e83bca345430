# backend/app/routers/tasks.py
from datetime import datetime
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, BeforeValidator, Field
from typing import Annotated, List, Literal, Optional
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.services.board import tasks as task_service

router = APIRouter()

Priority = Literal["low", "medium", "high", "urgent"]


# ── Request / Response models ────────────────────────────────────────────────

class ActivityResponse(BaseModel):
    type: str
    message: str
    at: str


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    status: str
    priority: str
    dueDate: Optional[str]
    activities: List[ActivityResponse]
    createdAt: Optional[str]
    updatedAt: Optional[str]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Forms send "" for an empty date input
DueDate = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: DueDate = Field(None, alias="dueDate")
    priority: Optional[Priority] = None

    class Config:
        populate_by_name = True


class TaskUpdate(BaseModel):
    """Every field is optional; only the ones actually sent are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: DueDate = Field(None, alias="dueDate")
    priority: Optional[Priority] = None

    class Config:
        populate_by_name = True

    def present_fields(self) -> dict:
        """Fields the client sent, by attribute name; explicit nulls included."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All of the user's tasks, oldest first."""
    return [t.to_dict() for t in task_service.list_tasks(db, current_user.id)]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task = task_service.create_task(
        db,
        current_user.id,
        title=data.title,
        description=data.description,
        status=data.status,
        due_date=data.due_date,
        priority=data.priority,
    )
    return task.to_dict()


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Partial update; each field that really changes adds one activity entry."""
    task = task_service.update_task(db, current_user.id, task_id, data.present_fields())
    return task.to_dict()


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task_service.delete_task(db, current_user.id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
