from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV = "TAG_TIMELINE_LOG_LEVEL"


def resolve_log_level(level: str | None = None) -> str:
    resolved = level or os.getenv(LOG_LEVEL_ENV) or "INFO"
    return resolved.strip().upper()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT)
