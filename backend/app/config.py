# backend/app/config.py
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration"""

    # Database
    DATABASE_URL: str = "sqlite:///./kanban.db"

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days
    COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False

    # Application
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Board summarizer (any OpenAI-compatible, Anthropic or Ollama endpoint)
    AI_API_FORMAT: str = "openai"
    AI_API_ENDPOINT: str = ""
    AI_API_KEY: str = ""
    AI_MODEL: str = ""
    AI_TEMPERATURE: float = 0.3
    AI_MAX_TOKENS: int = 600

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
