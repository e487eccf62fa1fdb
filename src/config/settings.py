"""
Configuration settings for the Support Desk dashboard.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Application Configuration
    app_name: str = "AI Responder"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Auth collaborator (GoTrue + PostgREST)
    auth_url: str = "http://localhost:54321"
    auth_anon_key: Optional[str] = None

    # Backend API collaborator
    backend_url: str = "http://localhost:8000"

    # Session
    secret_key: str = "dev-secret-key"
    session_cookie: str = "support_session"
    session_max_age: int = 14 * 24 * 3600
    session_https_only: bool = False

    # Dashboard
    query_volume_days: int = 7

    # Performance
    request_timeout: int = 30


# Global settings instance
settings = Settings()

def get_settings() -> Settings:
    """Return the global settings instance."""
    return settings
