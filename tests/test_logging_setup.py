from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from spaces_storage.config import LoggingSettings, Settings
from spaces_storage.utils.logging_setup import LOGGER_NAME, setup_logging


def test_setup_logging_configures_package_logger_once(tmp_path) -> None:
    settings = Settings(
        secret_salt="x",
        logging=LoggingSettings(level="debug", file="spaces.log", log_dir=str(tmp_path)),
    )

    logger = setup_logging(settings, force=True)

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert (tmp_path / "spaces.log").exists()

    handlers = list(logger.handlers)
    assert setup_logging(Settings(secret_salt="x")) is logger
    assert logger.handlers == handlers

    logging.getLogger(f"{LOGGER_NAME}.backend").info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in (tmp_path / "spaces.log").read_text(encoding="utf-8")

    setup_logging(Settings(secret_salt="x", logging=LoggingSettings(console=False)), force=True)
