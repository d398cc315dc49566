"""
Application configuration using pydantic-settings.
Loads environment variables from .env file.

Nested config groups (RepliersConfig, SessionConfig) are env-overridable via
the double-underscore delimiter, e.g.:
    REPLIERS__BASE_URL=https://sandbox.repliers.io
    REPLIERS__REQUEST_TIMEOUT_SECONDS=15
    SESSIONS__MAX_SESSIONS=500
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepliersConfig(BaseModel):
    """Repliers NLP and listings API configuration."""

    base_url: str = "https://api.repliers.io"
    nlp_path: str = "/nlp"
    # Header carrying the credential on both the NLP and the listings call
    api_key_header: str = "REPLIERS-API-KEY"
    # Request key carrying the previous conversation id. Repliers responds with
    # both conversationId and nlpId; set to "nlpId" to match its request docs.
    conversation_id_field: str = "conversationId"
    # Appended to every listings URL so the API returns all listing fields
    select_param: str = "select=*"
    # Transport-level timeout; no operation defines its own
    request_timeout_seconds: float = 30.0

    @property
    def nlp_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.nlp_path}"


class SessionConfig(BaseModel):
    """Limits for the in-memory conversation session registry."""

    # Oldest session is evicted once this many conversations are open
    max_sessions: int = 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Fallback credential when a request does not carry its own key
    repliers_api_key: str = ""

    # App Settings
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:6006"]

    # Nested config groups (env-overridable via SECTION__KEY format)
    repliers: RepliersConfig = Field(default_factory=RepliersConfig)
    sessions: SessionConfig = Field(default_factory=SessionConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
