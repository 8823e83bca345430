# backend/app/services/ai/base.py
from abc import ABC, abstractmethod
from typing import List, Dict, Any

class AIProvider(ABC):
    """Abstract base class for AI providers"""

    @abstractmethod
    async def chat(self, messages: List[Dict[str, str]], settings: Dict[str, Any]) -> str:
        """
        Send a chat request and return the reply text

        Args:
            messages: List of message dicts with 'role' and 'content'
            settings: api_format, api_endpoint, api_key, model_name, temperature, max_tokens

        Returns:
            Response text from the model
        """
        pass
