from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TIMESHEETS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    database_url: str = "sqlite+aiosqlite:///./timesheets.db"

    # For local development
    auto_create_db: bool = False

    # Session cookie auth. In production, override via env.
    session_secret: SecretStr = SecretStr("dev-insecure-change-me")
    session_cookie_name: str = "timesheets_session"
    session_cookie_same_site: str = "lax"
    session_cookie_https_only: bool = False
    session_cookie_max_age_seconds: int = 60 * 60

    log_level: str = "INFO"
    log_json: bool = False
    log_http_requests: bool = True

    # Business timezone used for "today" and "this month" in admin stats.
    timezone: str = "UTC"

    # Only enable behind a reverse proxy that overwrites these headers.
    trust_proxy_headers: bool = False

    auth_rate_limit_enabled: bool = True
    login_rate_limit_ip_attempts: int = 20
    login_rate_limit_ip_window_seconds: int = 300
    login_rate_limit_code_attempts: int = 10
    login_rate_limit_code_window_seconds: int = 300


def get_settings() -> Settings:
    return Settings()
