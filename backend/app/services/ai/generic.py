# backend/app/services/ai/generic.py
from typing import List, Dict, Any, Optional
import httpx
from app.services.ai.base import AIProvider

# Fail fast when the server is unreachable; allow slow local models time to generate.
_LLM_TIMEOUT = httpx.Timeout(connect=10.0, read=120.0, write=30.0, pool=5.0)

class GenericLLMProvider(AIProvider):
    """
    Talks to any LLM HTTP API in one of three wire formats:
    OpenAI-compatible chat completions, Anthropic messages, or Ollama chat.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=_LLM_TIMEOUT, transport=self._transport)

    async def chat(self, messages: List[Dict[str, str]], settings: Dict[str, Any]) -> str:
        api_format = settings.get("api_format", "openai")
        api_endpoint = settings.get("api_endpoint")

        if not api_endpoint:
            raise ValueError("API endpoint not configured")

        if api_format == "openai":
            return await self._openai_format(api_endpoint, messages, settings)
        elif api_format == "anthropic":
            return await self._anthropic_format(api_endpoint, messages, settings)
        elif api_format == "ollama":
            return await self._ollama_format(api_endpoint, messages, settings)
        else:
            raise ValueError(f"Unsupported API format: {api_format}")

    async def _post(self, endpoint: str, payload: Dict, headers: Dict) -> Dict:
        async with self._client() as client:
            try:
                response = await client.post(endpoint, json=payload, headers=headers)
            except httpx.ReadTimeout:
                raise ValueError("The LLM took too long to respond.")
            response.raise_for_status()
            return response.json()

    async def _openai_format(self, endpoint: str, messages: List[Dict], settings: Dict) -> str:
        """OpenAI-compatible format (OpenAI, Groq, LM Studio, LocalAI, etc.)"""
        headers = {"Content-Type": "application/json"}
        if settings.get("api_key"):
            headers["Authorization"] = f"Bearer {settings['api_key']}"

        payload = {
            "model": settings.get("model_name") or "default",
            "messages": messages,
            "temperature": settings.get("temperature", 0.3),
            "max_tokens": settings.get("max_tokens", 600),
            "stream": False,
        }
        data = await self._post(endpoint, payload, headers)
        return data["choices"][0]["message"]["content"]

    async def _anthropic_format(self, endpoint: str, messages: List[Dict], settings: Dict) -> str:
        """Anthropic messages format"""
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
        }
        if settings.get("api_key"):
            headers["x-api-key"] = settings["api_key"]

        # System prompt travels as a top-level key
        system_content = None
        filtered_messages = []
        for msg in messages:
            if msg["role"] == "system":
                system_content = msg["content"]
            else:
                filtered_messages.append(msg)

        payload = {
            "model": settings.get("model_name") or "default",
            "messages": filtered_messages,
            "temperature": settings.get("temperature", 0.3),
            "max_tokens": settings.get("max_tokens", 600),
        }
        if system_content:
            payload["system"] = system_content

        data = await self._post(endpoint, payload, headers)
        return data["content"][0]["text"]

    async def _ollama_format(self, endpoint: str, messages: List[Dict], settings: Dict) -> str:
        """Ollama local chat format"""
        payload = {
            "model": settings.get("model_name") or "default",
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": settings.get("temperature", 0.3),
                "num_predict": settings.get("max_tokens", 600),
            },
        }
        data = await self._post(endpoint, payload, {"Content-Type": "application/json"})
        return data["message"]["content"]
