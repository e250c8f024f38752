"""Logging setup driven by ``LoggingConfig`` (level + text|json format)."""
from __future__ import annotations

import json
import logging
from typing import Any

from .config.schemas.observability import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data: dict[str, Any] = {
            "ts": record.created,
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def configure_logging(cfg: LoggingConfig | None = None) -> logging.Logger:
    """Attach a single stream handler to the ``gantry`` logger.

    Idempotent: a repeated call replaces the handler installed earlier.
    """
    cfg = cfg or LoggingConfig()
    logger = logging.getLogger("gantry")
    for h in list(logger.handlers):
        if getattr(h, "_gantry_handler", False):
            logger.removeHandler(h)
    h = logging.StreamHandler()
    if cfg.format == "json":
        h.setFormatter(JsonFormatter())
    else:
        h.setFormatter(logging.Formatter(TEXT_FORMAT))
    h._gantry_handler = True  # type: ignore[attr-defined]
    logger.addHandler(h)
    logger.setLevel(_LEVELS[cfg.level])
    return logger


__all__ = ["configure_logging", "JsonFormatter"]
