"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from spaces_storage.config import LoggingSettings, Settings

LOGGER_NAME = "spaces_storage"
_CONFIGURED_FLAG = "_spaces_configured"


def _build_handlers(cfg: LoggingSettings, formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())

    if cfg.file:
        path = Path(cfg.file)
        if not path.is_absolute():
            path = Path(cfg.log_dir) / path
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings, *, force: bool = False) -> logging.Logger:
    """Attach handlers to the `spaces_storage` logger once per process.

    Only this package's logger tree is touched; the host application keeps
    its own logging setup. Pass `force=True` to rebuild the handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, _CONFIGURED_FLAG, False) and not force:
        return logger

    cfg = settings.logging
    level = getattr(logging, str(cfg.level or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(fmt=cfg.format, datefmt=cfg.datefmt)

    for old in logger.handlers:
        old.close()
    logger.handlers = _build_handlers(cfg, formatter)
    logger.setLevel(level)
    logger.propagate = False
    setattr(logger, _CONFIGURED_FLAG, True)
    return logger
