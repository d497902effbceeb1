"""Helpers shared by CLI commands."""

import logging
from pathlib import Path
from typing import Any

from cardwise.application.config import AppConfig, resolve_config
from cardwise.domain.exceptions import (
    CardNotFoundError,
    CardwiseError,
    DuplicateCardError,
    InvalidCardError,
    NoCurrentCardError,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config with CLI overrides; None means 'not given'."""
    return resolve_config(overrides)


def verbosity_to_level(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def attach_log_file(log_dir: Path) -> Path | None:
    """Mirror log output into <log_dir>/cardwise.log. Returns the file path, if attached."""
    log_file = log_dir / "cardwise.log"
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
            return log_file
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return log_file


def humanize_error(error: Exception) -> str:
    """Turn an exception into a short message for the terminal."""
    if isinstance(error, DuplicateCardError):
        return "This card already exists!"
    if isinstance(error, InvalidCardError):
        return "Both front and back need some text."
    if isinstance(error, NoCurrentCardError):
        return "There is no card to rate right now."
    if isinstance(error, CardNotFoundError):
        return f"Card not found: {error.card_id}"
    if isinstance(error, CardwiseError):
        return str(error)
    return f"Unexpected error: {error}"
