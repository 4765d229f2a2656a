"""DealDesk configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class DealDeskSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///dealdesk.db"
    echo_sql: bool = False
    app_title: str = "DealDesk"
    log_level: str = "INFO"

    # Set by the identity gateway in front of the app
    user_header: str = "X-User-Id"

    # Outbound call placement
    call_webhook_url: str = "https://hooks.example.com/call-customer"
    call_webhook_timeout_seconds: float = 30.0

    activity_feed_limit: int = 20

    model_config = {"env_prefix": "DEALDESK_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = DealDeskSettings()
