"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    diet_plan_provider: Literal["gemini", "openai"] = "gemini"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.2
    generation_max_output_tokens: int = 2048
    generation_timeout_seconds: float = 30.0
    pose_confidence_threshold: float = 0.5
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def supabase_configured(self) -> bool:
        """Return True when both Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_service_key)

    def missing_credentials(self) -> tuple[str, ...]:
        """Name the credentials the diet plan flow needs but lacks."""
        missing = []
        if self.diet_plan_provider == "gemini" and not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        if self.diet_plan_provider == "openai" and not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_key:
            missing.append("SUPABASE_SERVICE_KEY")
        return tuple(missing)
