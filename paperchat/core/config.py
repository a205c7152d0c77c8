import json
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in example .env files; treated as "not configured"
PLACEHOLDER_API_KEYS = {"your_openai_api_key_here"}


class Settings(BaseSettings):
    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM provider (OpenAI or any OpenAI-compatible endpoint)
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    AGENT_BASE_URL: str = Field(default="https://api.openai.com/v1")
    AGENT_MODEL: str = Field(default="gpt-3.5-turbo")
    # Server-side abort for upstream calls
    CHAT_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, le=600)
    SUGGESTIONS_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0, le=600)
    CHAT_MAX_TOKENS: int = Field(default=500, ge=1)
    SUGGESTIONS_MAX_TOKENS: int = Field(default=300, ge=1)
    TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    # Only the first chunk of the document is sent as context
    CONTEXT_CHUNK_CHARS: int = Field(default=3000, ge=100)

    # Limits shared by the server and the client-side validators
    MAX_FILE_SIZE_MB: int = Field(default=10, ge=1, le=500)
    MAX_MESSAGE_CHARS: int = Field(default=1000, ge=1)
    MAX_DOCUMENT_CHARS: int = Field(default=1_000_000, ge=1)

    # Client
    API_BASE_URL: str = Field(default="http://localhost:8000")
    MAX_RETRIES: int = Field(default=3, ge=0, le=10)
    # Automatic retries inside a single flow call, before the user is asked
    CLIENT_AUTO_RETRIES: int = Field(default=0, ge=0, le=10)

    # App
    # Accept JSON array or comma-separated string in ENV
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    # Logging
    LOG_LEVEL: str = Field(default="INFO")  # DEBUG|INFO|WARNING|ERROR|CRITICAL

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    # --- Validators / Normalizers ---
    @field_validator("AGENT_BASE_URL", "API_BASE_URL", mode="before")
    @classmethod
    def _normalize_base_url(cls, v: Union[str, None], info) -> str:
        if not v:
            return cls.model_fields[info.field_name].default
        return str(v).strip().rstrip("/")

    @field_validator("OPENAI_API_KEY", mode="before")
    @classmethod
    def _normalize_api_key(cls, v: Union[str, None]) -> Optional[str]:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("AGENT_MODEL", mode="before")
    @classmethod
    def _normalize_agent_model(cls, v: Union[str, None]) -> str:
        s = str(v).strip() if v is not None else ""
        return s or "gpt-3.5-turbo"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        # Accept list, JSON string, or comma-separated string
        if v is None:
            return ["http://localhost:3000"]
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    arr = json.loads(s)
                except json.JSONDecodeError:
                    arr = None
                if isinstance(arr, list):
                    return arr
            return [p.strip() for p in s.split(",") if p.strip()]
        return list(v)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: Union[str, None]) -> str:
        lv = str(v).strip().upper() if v is not None else "INFO"
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        return lv if lv in allowed else "INFO"


settings = Settings()
