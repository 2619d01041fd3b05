"""Logging configuration for the cleanup service and scripts."""

import logging
import sys

from cachesweep.core.config import get_settings

# Third-party loggers that are noisy at INFO during a sweep (one line per statement).
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "asyncio")


def setup_logging(verbose: bool = False) -> None:
    """Configure process-wide logging.

    Level is DEBUG when settings.debug or verbose is True, otherwise INFO.
    SQLAlchemy engine/pool logging stays at WARNING unless database_echo is
    set, so per-batch DELETE statements do not flood the log. Output goes
    to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if (settings.debug or verbose) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.database_echo:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.
    """
    return logging.getLogger(name)
