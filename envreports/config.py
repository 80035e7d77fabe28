"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration for the environmental report review service."""

    # Application
    app_name: str = "Environmental Reports"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    log_level: str = "INFO"
    log_format: str = Field(default="json", pattern=r"^(json|console)$")

    # API
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"
    rate_limit_default: str = "100/minute"

    # Report store selection
    report_store: str = Field(default="sql", pattern=r"^(memory|sql|supabase)$")
    seed_sample_data: bool = False

    # Local relational database
    database_url: str = "sqlite:///./environmental_reports.db"
    database_echo: bool = False

    # Hosted backend-as-a-service (PostgREST / Supabase)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_table: str = "environmental_report"
    supabase_timeout: float = Field(default=10.0, gt=0)

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {"env_prefix": "ENVREPORTS_", "env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Return a settings instance built from the environment."""
    return Settings()
