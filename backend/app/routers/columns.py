# backend/app/routers/columns.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.services.board import columns as column_service

router = APIRouter()


# ── Request / Response models ────────────────────────────────────────────────

class ColumnResponse(BaseModel):
    id: str
    key: str
    label: str
    position: int


class ColumnLabel(BaseModel):
    label: str = Field(..., max_length=200)


class BootstrapRequest(BaseModel):
    labels: List[str]


class ReorderRequest(BaseModel):
    keys: List[str]


class MoveRequest(BaseModel):
    direction: Literal["left", "right"]


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.get("", response_model=List[ColumnResponse])
async def list_columns(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The user's columns in board order."""
    return [c.to_dict() for c in column_service.list_columns(db, current_user.id)]


@router.post("", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(
    data: ColumnLabel,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return column_service.create_column(db, current_user.id, data.label).to_dict()


@router.put("", response_model=List[ColumnResponse])
async def reorder_columns(
    data: ReorderRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save a new left-to-right order. Body lists every column key once."""
    return [c.to_dict() for c in column_service.reorder_columns(db, current_user.id, data.keys)]


@router.post("/bootstrap", response_model=List[ColumnResponse], status_code=status.HTTP_201_CREATED)
async def bootstrap_columns(
    data: BootstrapRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Onboarding: create the first columns of an empty board."""
    return [c.to_dict() for c in column_service.bootstrap_columns(db, current_user.id, data.labels)]


@router.put("/{key}", response_model=ColumnResponse)
async def rename_column(
    key: str,
    data: ColumnLabel,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change a column's label. Its key never changes."""
    return column_service.rename_column(db, current_user.id, key, data.label).to_dict()


@router.post("/{key}/move", response_model=List[ColumnResponse])
async def move_column(
    key: str,
    data: MoveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return [c.to_dict() for c in column_service.move_column(db, current_user.id, key, data.direction)]


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    key: str,
    migrate_to: Optional[str] = Query(None, alias="migrateTo"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a column after moving its tasks to `migrateTo` (or the first remaining column)."""
    column_service.delete_column(db, current_user.id, key, migrate_to)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
