"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    agent_secret: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "high"
    openai_store: bool = False
    max_essay_length: int = Field(default=50000, gt=0)
    code_max_attempts: int = Field(default=100, gt=0)
    default_content_questions: int = Field(default=3, ge=0)
    default_process_questions: int = Field(default=2, ge=0)
    allow_transcript_overwrite: bool = True
    sessions_table: str = "defense_sessions"
    questions_table: str = "defense_questions"
    audit_table: str = "audit_events"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
