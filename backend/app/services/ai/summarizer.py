# backend/app/services/ai/summarizer.py
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.config import settings as app_settings
from app.core.errors import SummaryUnavailable
from app.models.column import BoardColumn
from app.models.task import Task, as_utc
from app.services.ai.base import AIProvider
from app.services.ai.generic import GenericLLMProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful project assistant. You receive a Kanban board as JSON: "
    "its columns in left-to-right order and its tasks. Write a short summary of "
    "where things stand: what is done, what is in flight, what is overdue or "
    "urgent, and one or two suggested next steps. Plain text, under 150 words."
)


def board_snapshot(columns: Sequence[BoardColumn], tasks: Sequence[Task]) -> Dict[str, Any]:
    """The board as the summarizer sees it. Due dates are plain calendar dates."""
    return {
        "columns": [{"key": c.key, "label": c.label} for c in columns],
        "tasks": [
            {
                "title": t.title,
                "description": t.description or "",
                "status": t.status,
                "priority": t.priority,
                "dueDate": as_utc(t.due_date).strftime("%Y-%m-%d") if t.due_date else None,
            }
            for t in tasks
        ],
    }


class BoardSummarizer:
    """Submits a board snapshot to the configured LLM and returns its text."""

    def __init__(self, provider: Optional[AIProvider] = None, settings: Optional[Dict[str, Any]] = None):
        self.provider = provider or GenericLLMProvider()
        self.settings = settings if settings is not None else self.settings_from_config()

    @staticmethod
    def settings_from_config() -> Dict[str, Any]:
        return {
            "api_format": app_settings.AI_API_FORMAT,
            "api_endpoint": app_settings.AI_API_ENDPOINT,
            "api_key": app_settings.AI_API_KEY,
            "model_name": app_settings.AI_MODEL,
            "temperature": app_settings.AI_TEMPERATURE,
            "max_tokens": app_settings.AI_MAX_TOKENS,
        }

    @property
    def configured(self) -> bool:
        return bool(self.settings.get("api_endpoint"))

    async def summarize(self, snapshot: Dict[str, Any]) -> str:
        if not self.configured:
            raise SummaryUnavailable("AI summary is not configured")

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(snapshot, ensure_ascii=False)},
        ]
        try:
            text = await self.provider.chat(messages, self.settings)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning("AI_SUMMARY_FAILED format=%s error=%s", self.settings.get("api_format"), e)
            raise SummaryUnavailable("AI summary is unavailable right now") from e

        text = (text or "").strip() if isinstance(text, str) else ""
        if not text:
            raise SummaryUnavailable("AI summary came back empty")
        return text


def get_summarizer() -> BoardSummarizer:
    """FastAPI dependency; tests override it."""
    return BoardSummarizer()
