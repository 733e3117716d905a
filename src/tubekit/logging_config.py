from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

_LOGGER_NAME = "tubekit"
LOG_FILE_ENV = "TUBEKIT_LOG_FILE"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# HTTP client chatter from the model endpoint; only surfaced with --debug.
_CLIENT_LOGGERS = ("httpx", "openai", "pydantic_ai")


def setup_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Configure the ``tubekit`` logger hierarchy.

    Warnings go to stderr unless ``verbose`` lowers the threshold to DEBUG. A file
    handler is added when ``log_file`` or ``TUBEKIT_LOG_FILE`` is set. Repeated calls
    replace the previous handlers.
    """

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    _drop_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console)

    target = log_file or _log_file_from_env()
    if target is not None:
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        logger.addHandler(file_handler)

    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _log_file_from_env() -> Path | None:
    raw = os.environ.get(LOG_FILE_ENV, "").strip()
    return Path(raw).expanduser() if raw else None


__all__ = ["LOG_FILE_ENV", "LOG_FORMAT", "setup_logging"]
