# backend/app/routers/ai.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.services.ai.summarizer import BoardSummarizer, board_snapshot, get_summarizer
from app.services.board.columns import list_columns
from app.services.board.tasks import list_tasks

router = APIRouter()


class SummaryResponse(BaseModel):
    summary: str


@router.post("/summary", response_model=SummaryResponse)
async def board_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    summarizer: BoardSummarizer = Depends(get_summarizer),
):
    """Ask the LLM for a short status report on the user's board."""
    snapshot = board_snapshot(list_columns(db, current_user.id), list_tasks(db, current_user.id))
    return {"summary": await summarizer.summarize(snapshot)}
