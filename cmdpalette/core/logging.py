"""Structured logging for cmdpalette.

Every module logs under the "cmdpalette" logger namespace. Nothing is
emitted until the host calls setup_logging(); a library embedding the
palette can attach its own handlers instead.

Handlers installed by setup_logging():
    - stderr, one readable line per record
    - cmdpalette.log, one JSON object per line, rotated at 10 MB

Structured fields travel in a "context" dict:

    logger = get_logger(__name__)
    logger.info("Command executed", extra={"context": {"command_id": "notes:new"}})
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

ROOT_LOGGER_NAME = "cmdpalette"
LOG_FILE_NAME = "cmdpalette.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _context(record: logging.LogRecord) -> dict[str, Any]:
    context = getattr(record, "context", None)
    return context if isinstance(context, dict) else {}


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, module, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        context = _context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Short console line: time, level, logger, message and context pairs."""

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{clock} {record.levelname[:4]:4s} {record.name}: {record.getMessage()}"
        context = _context(record)
        if context:
            pairs = ", ".join(f"{k}={v}" for k, v in context.items())
            line += f" [{pairs}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


_logging_initialized = False
_installed_handlers: list[logging.Handler] = []


def setup_logging(
    log_dir: Optional[Path] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """Install console and JSON file handlers on the cmdpalette logger.

    Safe to call more than once; only the first call has an effect until
    reset_logging() is called.

    Args:
        log_dir: Directory for cmdpalette.log. Defaults to ~/.cmdpalette/logs
        console_level: Minimum level for stderr (default: INFO)
        file_level: Minimum level for the log file (default: DEBUG)
    """
    global _logging_initialized

    if _logging_initialized:
        return

    log_dir = Path(log_dir) if log_dir is not None else Path.home() / ".cmdpalette" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(ConsoleFormatter())

    logfile = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    logfile.setLevel(file_level)
    logfile.setFormatter(JSONFormatter())

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    for handler in (console, logfile):
        root.addHandler(handler)
        _installed_handlers.append(handler)

    _logging_initialized = True
    root.info("Logging initialized", extra={"context": {"log_dir": str(log_dir)}})


def reset_logging() -> None:
    """Remove and close the handlers installed by setup_logging()."""
    global _logging_initialized
    root = logging.getLogger(ROOT_LOGGER_NAME)
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.close()
    _logging_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, always inside the cmdpalette namespace.

    get_logger("engine.search") and get_logger("cmdpalette.engine.search")
    return the same logger.
    """
    prefix = ROOT_LOGGER_NAME + "."
    if name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    if name.startswith(prefix):
        name = name[len(prefix) :]
    return logging.getLogger(prefix + name)
