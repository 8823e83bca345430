"""
Tests for the board summary: snapshot shape and graceful degradation.
"""
import json

import httpx

from app.main import app
from app.services.ai.generic import GenericLLMProvider
from app.services.ai.summarizer import BoardSummarizer, get_summarizer

OPENAI_SETTINGS = {
    "api_format": "openai",
    "api_endpoint": "http://llm.test/v1/chat/completions",
    "api_key": "sk-test",
    "model_name": "tiny",
    "temperature": 0.2,
    "max_tokens": 100,
}


def _use_transport(handler, settings=OPENAI_SETTINGS):
    provider = GenericLLMProvider(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_summarizer] = lambda: BoardSummarizer(provider=provider, settings=settings)


def test_summary_unconfigured_is_unavailable(client, board):
    response = client.post("/ai/summary", headers=board)
    assert response.status_code == 503
    assert "not configured" in response.json()["detail"]


def test_summary_sends_snapshot_and_returns_text(client, board):
    client.post("/tasks", json={"title": "Ship v1", "status": "done", "dueDate": "2026-11-02T23:30:00Z"}, headers=board)
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "  All shipped.  "}}]})

    _use_transport(handler)
    response = client.post("/ai/summary", headers=board)

    assert response.status_code == 200
    assert response.json() == {"summary": "All shipped."}
    assert seen["auth"] == "Bearer sk-test"
    snapshot = json.loads(seen["body"]["messages"][1]["content"])
    assert [c["key"] for c in snapshot["columns"]] == ["todo", "in-progress", "done"]
    assert snapshot["tasks"] == [{
        "title": "Ship v1",
        "description": "",
        "status": "done",
        "priority": "medium",
        "dueDate": "2026-11-02",
    }]


def test_summary_upstream_error_is_unavailable(client, board):
    _use_transport(lambda request: httpx.Response(500, json={"error": "boom"}))
    response = client.post("/ai/summary", headers=board)
    assert response.status_code == 503

    # The rest of the board keeps working
    assert client.get("/columns", headers=board).status_code == 200


def test_summary_unreachable_is_unavailable(client, board):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    _use_transport(handler)
    assert client.post("/ai/summary", headers=board).status_code == 503


def test_summary_unexpected_payload_is_unavailable(client, board):
    _use_transport(lambda request: httpx.Response(200, json={"unexpected": True}))
    assert client.post("/ai/summary", headers=board).status_code == 503


def test_anthropic_format_moves_system_prompt(client, board):
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        seen["key"] = request.headers.get("x-api-key")
        return httpx.Response(200, json={"content": [{"type": "text", "text": "Summary."}]})

    _use_transport(handler, settings={**OPENAI_SETTINGS, "api_format": "anthropic"})
    response = client.post("/ai/summary", headers=board)

    assert response.json() == {"summary": "Summary."}
    assert seen["key"] == "sk-test"
    assert "system" in seen["body"]
    assert [m["role"] for m in seen["body"]["messages"]] == ["user"]
