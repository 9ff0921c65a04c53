"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class _YamlDefaults(BaseSettings):
    """YAML values arrive as init kwargs; environment variables override them."""

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings,
    ):
        return env_settings, dotenv_settings, init_settings, file_secret_settings


class ClockConfig(_YamlDefaults):
    # IANA zone name that defines the business day, or "local" for the host zone
    timezone: str = "local"

    model_config = {"env_prefix": "ORDERDESK_CLOCK_"}


class LoggingConfig(_YamlDefaults):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    model_config = {"env_prefix": "ORDERDESK_LOGGING_"}


class NotificationConfig(_YamlDefaults):
    max_queue: int = 100

    model_config = {"env_prefix": "ORDERDESK_NOTIFICATIONS_"}


class Settings(_YamlDefaults):
    database_url: str = "sqlite+aiosqlite:///data/orderdesk.db"
    clock: ClockConfig = Field(default_factory=ClockConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "ORDERDESK_"}


def get_settings() -> Settings:
    """Build Settings from YAML defaults; ``ORDERDESK_*`` env vars take precedence."""
    y = _yaml
    clock = ClockConfig(**y.get("clock", {}))
    log = LoggingConfig(**y.get("logging", {}))
    notif = NotificationConfig(**y.get("notifications", {}))
    db_url = y.get("database", {}).get("url", "sqlite+aiosqlite:///data/orderdesk.db")
    return Settings(
        database_url=db_url,
        clock=clock,
        logging=log,
        notifications=notif,
    )
