import json
from pathlib import Path
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PROJECT_NAME = "Chthon Chat API"
DEFAULT_API_V1_PREFIX = "/api/v1"
DEFAULT_DATABASE_URL = "sqlite:///./chthon.db"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. When listing items, use simple bullet points (•) for list items "
    "and avoid using special characters like ### or **. Format categories with a colon at the end."
)
DEFAULT_TIERS_JSON = json.dumps(
    {
        "registered": {
            "max_tokens": 1000,
            "can_select_provider": True,
            "can_upload_images": True,
            "available_providers": ["openai/gpt-4o-mini", "google/gemini-1.5-flash"],
        },
        "premium": {
            "max_tokens": 1500,
            "can_select_provider": True,
            "can_upload_images": True,
            "available_providers": [
                "openai/gpt-4o-mini",
                "google/gemini-1.5-flash",
                "xai/grok-2-latest",
            ],
        },
        "custom": {
            "max_tokens": 1000,
            "can_select_provider": True,
            "can_upload_images": True,
            "available_providers": ["openai/gpt-4o-mini", "google/gemini-1.5-flash"],
        },
    },
    ensure_ascii=True,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    PROJECT_NAME: str = DEFAULT_PROJECT_NAME
    API_V1_PREFIX: str = DEFAULT_API_V1_PREFIX
    ENV: str = 'development'
    DEBUG: bool = False

    DATABASE_URL: str = DEFAULT_DATABASE_URL
    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = False
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ['*']

    SECRET_KEY: str = 'change-me'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    AUTO_CREATE_TABLES: bool = False
    ADMIN_KEY: Optional[str] = None

    GATEWAY_BASE_URL: str = 'https://api.edenai.run/v2/llm'
    GATEWAY_API_KEY: Optional[str] = None
    GATEWAY_TIMEOUT_SECONDS: float = 60.0
    SYSTEM_PROMPT: str = DEFAULT_SYSTEM_PROMPT
    TEMPERATURE: float = 0.7
    CONTEXT_TOKEN_BUDGET: int = 4000
    TIERS: str = DEFAULT_TIERS_JSON

    UPLOAD_DIR: Path = Path('uploads')
    UPLOAD_MAX_BYTES: int = 2 * 1024 * 1024
    PUBLIC_BASE_URL: str = ''

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return []
            if value == '*':
                return ['*']
            return [item.strip() for item in value.split(',') if item.strip()]
        return value

    @field_validator('PUBLIC_BASE_URL')
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip('/')


settings = Settings()
