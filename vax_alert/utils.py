"""
Utility helpers: logging setup.

Вспомогательные функции: настройка логирования.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from .config import LoggingConfig, get_settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Клиент дашборда дёргается раз в минуту, построчный лог каждого запроса не нужен
QUIET_LOGGERS = ("httpx", "httpcore")


def _handlers(logging_cfg: LoggingConfig, log_file: Path) -> List[logging.Handler]:
    return [
        RotatingFileHandler(
            log_file,
            maxBytes=logging_cfg.max_bytes,
            backupCount=logging_cfg.backup_count,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ]


def setup_logging(logging_cfg: LoggingConfig | None = None) -> Path:
    """
    Route all records to a rotating file in ``logs_dir`` and to the console.

    Заменяет обработчики корневого логгера и возвращает путь к лог-файлу.
    """
    if logging_cfg is None:
        logging_cfg = get_settings().logging

    logging_cfg.logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logging_cfg.logs_dir / logging_cfg.log_file
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in _handlers(logging_cfg, log_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(logging_cfg.log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file


__all__ = ["setup_logging", "LOG_FORMAT"]
