import asyncio
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from hooklog.core.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"

logger = logging.getLogger("hooklog")


class EventLog(Protocol):
    """Sink the dispatcher and formatters write their summary lines to."""

    def info(self, msg: str, *args, **kwargs) -> None: ...

    def warning(self, msg: str, *args, **kwargs) -> None: ...

    def error(self, msg: str, *args, **kwargs) -> None: ...


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Attach console and file handlers to the ``hooklog`` logger.

    Safe to call more than once; handlers are only added the first time.
    """
    logger.setLevel(settings.log_level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    return logger


@lru_cache
def get_event_log() -> EventLog:
    return logging.getLogger("hooklog.events")


def _log_uncaught(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical(
        "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
    )


def _log_unhandled_task_error(loop: asyncio.AbstractEventLoop, context: dict):
    exc = context.get("exception")
    message = context.get("message", "Unhandled error in event loop")
    if exc is not None:
        logger.error(f"Unhandled task error: {message}", exc_info=exc)
    else:
        logger.error(f"Unhandled task error: {message}")


def install_process_hooks(loop: asyncio.AbstractEventLoop | None = None) -> None:
    """
    Uncaught exceptions are logged and still end the process; errors from
    orphaned asyncio tasks are only logged.
    """
    sys.excepthook = _log_uncaught
    if loop is not None:
        loop.set_exception_handler(_log_unhandled_task_error)
