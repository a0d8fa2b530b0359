"""Logging for the HR panel: rich console output, one log file per day.

Records are routed through a queue so request handlers never block on
console or disk I/O.  Two filters decorate every record before it is
formatted:

* :class:`ContextFilter` prefixes the values bound with ``log_context``
  (the signed-in user, the month command being run, ...);
* :class:`ExtraFieldsFilter` appends the ``extra={...}`` mapping passed to a
  logging call, so ``LOGGER.info("Month opened", extra={"month": 3})`` prints
  ``Month opened [month=3]``.
"""
from __future__ import annotations

import atexit
import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

__all__ = [
    "init_logging",
    "get_logger",
    "shutdown_logging",
    "log_context",
    "timeit",
]

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "context", "fields"}

_NOISY_LOGGERS = ("sqlalchemy.engine", "multipart", "uvicorn.access")


def _default_log_dir() -> Optional[Path]:
    value = os.getenv("LOG_DIR", "logs")
    return Path(value) if value else None


@dataclass
class LoggingConfig:
    """Runtime configuration for the logging subsystem."""

    app_name: str = "hrpanel"
    level: str | int = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: Optional[Path] = field(default_factory=_default_log_dir)
    console: bool = True
    rich_tracebacks: bool = True
    quiet_loggers: tuple[str, ...] = _NOISY_LOGGERS


_config_lock = RLock()
_config: LoggingConfig | None = None
_listener: QueueListener | None = None
_context_filter = ContextFilter()


class ExtraFieldsFilter(logging.Filter):
    """Render structured ``extra`` values as a trailing ``[key=value ...]``."""

    def filter(self, record: logging.LogRecord) -> bool:
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extras:
            record.fields = " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
        else:
            record.fields = ""
        return True


_extra_filter = ExtraFieldsFilter()


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


class DailyFileHandler(logging.FileHandler):
    """Write to ``<prefix>-YYYY-MM-DD.log``, switching files at midnight."""

    def __init__(self, directory: Path, prefix: str, *, encoding: str = "utf-8") -> None:
        self.directory = directory
        self.prefix = prefix
        self.directory.mkdir(parents=True, exist_ok=True)
        self._current_date: date = datetime.now().date()
        super().__init__(self._path_for_date(self._current_date), mode="a", encoding=encoding)

    def _path_for_date(self, target_date: date) -> Path:
        return self.directory / f"{self.prefix}-{target_date.isoformat()}.log"

    def emit(self, record: logging.LogRecord) -> None:
        record_date = datetime.fromtimestamp(record.created).date()
        if record_date != self._current_date:
            self._current_date = record_date
            if self.stream:
                self.stream.close()
            self.baseFilename = os.fspath(self._path_for_date(record_date))
            self.stream = self._open()
        super().emit(record)


def _build_handlers(cfg: LoggingConfig, level: int) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if cfg.console:
        if cfg.rich_tracebacks:
            install_rich_traceback(show_locals=False)
        console_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=cfg.rich_tracebacks,
            show_path=False,
            markup=False,
            log_time_format="%Y-%m-%d %H:%M:%S",
        )
        console_handler.setFormatter(logging.Formatter("%(context)s%(message)s%(fields)s"))
        handlers.append(console_handler)

    if cfg.log_dir:
        file_handler = DailyFileHandler(Path(cfg.log_dir), cfg.app_name)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s%(fields)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def init_logging(**kwargs: object) -> None:
    """Configure the root logger once per process.

    Calling it again with the same options is a no-op; different options
    (typically ``level`` or ``log_dir`` from :class:`~hrpanel.core.config.Settings`)
    rebuild the handlers.
    """

    global _config, _listener

    with _config_lock:
        cfg = LoggingConfig()
        for key, value in kwargs.items():
            if hasattr(cfg, key):
                setattr(cfg, key, value)  # type: ignore[arg-type]

        if _config is not None:
            if _config == cfg:
                return
            _teardown_locked()

        level = _parse_level(cfg.level)
        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        handlers = _build_handlers(cfg, level)
        if handlers:
            # Filters run on the producing thread so contextvars are still bound.
            log_queue: SimpleQueue = SimpleQueue()
            queue_handler = QueueHandler(log_queue)
            queue_handler.setLevel(level)
            queue_handler.addFilter(_context_filter)
            queue_handler.addFilter(_extra_filter)
            root.addHandler(queue_handler)
            _listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
            _listener.start()

        for name in cfg.quiet_loggers:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

        _config = cfg


def _teardown_locked() -> None:
    global _listener, _config
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
    _listener = None
    _config = None
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


def shutdown_logging() -> None:
    """Flush queued records and stop the listener thread."""

    with _config_lock:
        _teardown_locked()


atexit.register(shutdown_logging)


def get_logger(name: str | None = None) -> logging.Logger:
    with _config_lock:
        if _config is None:
            init_logging()
    return logging.getLogger(name or "hrpanel")
