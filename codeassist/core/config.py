import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROJECT_NAME = "CodeAssist Chat API"
DEFAULT_API_PREFIX = "/api"
DEFAULT_MODEL_ID = "gemini-1.5-pro"
DEFAULT_PROVIDERS_JSON = json.dumps(
    [
        {
            "host": "gemini",
            "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
            "api_key_env": "GEMINI_API_KEY",
            "models": [
                {"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro"},
                {"id": "gemini-1.5-flash", "name": "Gemini 1.5 Flash"},
            ],
        },
    ],
    ensure_ascii=True,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    PROJECT_NAME: str = DEFAULT_PROJECT_NAME
    API_PREFIX: str = DEFAULT_API_PREFIX
    ENV: str = 'development'
    DEBUG: bool = False

    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = False
    CORS_ORIGINS: list[str] = ['*']

    PROVIDERS: str = DEFAULT_PROVIDERS_JSON
    DEFAULT_MODEL: str = DEFAULT_MODEL_ID
    DEFAULT_TEMPERATURE: float = 0.2
    DEFAULT_MAX_OUTPUT_TOKENS: int = 8192
    MAX_INPUT_CHARS: int = 30000
    GATEWAY_HISTORY_LIMIT: int = 50
    SYSTEM_PROMPT_PATH: str = 'prompts/system.md'

    SEED_MODEL_CONFIGS: bool = True

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


REPO_ROOT: Path = Path(__file__).resolve().parents[2]

settings = Settings()
