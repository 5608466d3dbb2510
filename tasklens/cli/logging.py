"""Logging setup for CLI runs.

Library modules log through ``logging.getLogger(__name__)`` under the
``tasklens`` namespace. The CLI attaches a rich handler on stderr whose level
follows ``-v``/``-vv`` and, unless disabled, a rotating log file.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "tasklens"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_MAX_BYTES = 1_000_000
_BACKUP_COUNT = 3


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    propagate: bool
    added: tuple[logging.Handler, ...]


def _console_level(verbosity: int) -> int:
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
    """Attach CLI handlers to the ``tasklens`` logger and return the prior state."""
    logger = logging.getLogger(ROOT_LOGGER)
    previous_level = logger.level
    previous_propagate = logger.propagate

    added: list[logging.Handler] = []

    console = RichHandler(
        console=Console(file=sys.stderr),
        show_time=False,
        show_path=verbosity >= 2,
        markup=False,
    )
    console.setLevel(_console_level(verbosity))
    added.append(console)

    if enable_file and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
                delay=True,
            )
        except OSError as exc:
            logger.warning("File logging disabled (%s): %s", log_file, exc)
        else:
            file_handler.setLevel(logging.DEBUG if verbosity >= 2 else logging.INFO)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            added.append(file_handler)

    for handler in added:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    return LoggingState(level=previous_level, propagate=previous_propagate, added=tuple(added))


def restore_logging(state: LoggingState) -> None:
    """Detach the handlers added by `configure_logging` and restore prior settings."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in state.added:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(state.level)
    logger.propagate = state.propagate
