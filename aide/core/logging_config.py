"""
Logging setup for Aide.

The API configures the root logger once at import time (see api/main.py);
every module then logs through ``get_logger(__name__)``. Output goes to
stdout at the configured level and to a per-day file that keeps
everything down to DEBUG, which is where tool-call traces end up.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that echo every HTTP exchange at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "groq")

_logging_configured = False


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Attach the console and daily-file handlers to the root logger.

    Later calls are no-ops, so importing the app twice (uvicorn reload,
    test collection) does not duplicate lines.

    Args:
        log_level: Console level name; unknown names fall back to INFO
        log_dir: Where aide_YYYYMMDD.log is written (default: <project>/logs)

    Returns:
        The root logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger()

    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    log_dir = Path(log_dir) if log_dir is not None else Path(__file__).parent.parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"aide_{datetime.now().strftime('%Y%m%d')}.log"

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True
    root_logger.debug(f"Logging configured: level={log_level}, file={log_file}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__`` so records carry the aide.* path."""
    return logging.getLogger(name)


class LoggerMixin:
    """
    Gives a class a ``self.logger`` named after the class.

    Used by capabilities that log from instance methods, e.g.
    SystemInfoCapability reporting an unavailable host query.
    """

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)
