"""
Config loading via Pydantic v2 and python-dotenv.

Загрузка конфигурации из .env и базовая валидация.
"""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


DEFAULT_DASHBOARD_URL = "https://turbovax.global.ssl.fastly.net/dashboard"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
# SMTPS, TLS с первого байта
DEFAULT_SMTP_PORT = 465


def load_env_file() -> str | None:
    """
    Load the nearest .env, searching upward from the working directory.

    Реальное окружение приоритетнее .env. Возвращает путь к найденному файлу.
    """
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        return None
    load_dotenv(env_path, override=False)
    return env_path


load_env_file()


class EmailConfig(BaseModel):
    # Письма отправляются самому себе: адрес и отправителя, и получателя
    address: str = Field(min_length=1)
    password: str = Field(min_length=1)
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = Field(default=DEFAULT_SMTP_PORT, ge=1, le=65535)


class MonitorConfig(BaseModel):
    dashboard_url: str = DEFAULT_DASHBOARD_URL
    check_interval: int = Field(default=60, ge=1)


class LoggingConfig(BaseModel):
    # Относительно рабочего каталога: после `pip install .` пакет лежит в site-packages
    logs_dir: Path = Field(default_factory=lambda: Path.cwd() / "logs")
    log_file: str = Field(default="vax_alert.log")
    log_level: str = Field(default="INFO")
    max_bytes: int = Field(default=5 * 1024 * 1024)  # 5 MB
    backup_count: int = Field(default=5)


class Settings(BaseModel):
    email: EmailConfig
    monitor: MonitorConfig = MonitorConfig()
    logging: LoggingConfig = LoggingConfig()


@lru_cache
def get_settings() -> Settings:
    """
    Load and cache settings.

    Raises ConfigError if the credentials are absent or a value is invalid.
    """
    env = os.environ

    try:
        email = EmailConfig(
            address=env.get("ALERT_EMAIL", ""),
            password=env.get("ALERT_EMAIL_PASSWORD", ""),
            smtp_host=env.get("SMTP_HOST", DEFAULT_SMTP_HOST),
            smtp_port=int(env.get("SMTP_PORT", str(DEFAULT_SMTP_PORT))),
        )
        monitor = MonitorConfig(
            dashboard_url=env.get("DASHBOARD_URL", DEFAULT_DASHBOARD_URL),
            check_interval=int(env.get("CHECK_INTERVAL", "60")),
        )
        logging_cfg = LoggingConfig(log_level=env.get("LOG_LEVEL", "INFO"))
        if env.get("LOGS_DIR"):
            logging_cfg = logging_cfg.model_copy(update={"logs_dir": Path(env["LOGS_DIR"])})
        return Settings(email=email, monitor=monitor, logging=logging_cfg)
    except (ValidationError, ValueError) as e:
        # int() падает с голым ValueError, pydantic с ValidationError
        raise ConfigError(f"Invalid configuration: {e}") from e


__all__ = [
    "Settings",
    "EmailConfig",
    "MonitorConfig",
    "LoggingConfig",
    "get_settings",
    "load_env_file",
]
