from __future__ import annotations

import logging
import logging.handlers
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_ROOT = "ygosearch"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    handlers: list[logging.Handler]
    propagate: bool


def _level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int,
    log_file: Path | None,
    enable_file: bool,
) -> LoggingState:
    """Route ``ygosearch`` loggers to stderr (and optionally a rotating file).

    Returns the previous logger state for ``restore_logging``.
    """
    logger = logging.getLogger(_ROOT)
    previous = LoggingState(
        level=logger.level,
        handlers=list(logger.handlers),
        propagate=logger.propagate,
    )

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    stderr_handler.setLevel(_level_for(verbosity))
    logger.addHandler(stderr_handler)

    level = _level_for(verbosity)
    if enable_file and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
        except OSError as e:
            logger.warning("File logging disabled: %s", e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            logger.addHandler(file_handler)
            level = logging.DEBUG

    logger.setLevel(level)
    logger.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(_ROOT)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in state.handlers:
        logger.addHandler(handler)
    logger.setLevel(state.level)
    logger.propagate = state.propagate
