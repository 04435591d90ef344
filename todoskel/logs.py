"""Structured loggers and helpers that write log entries for the application."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from .entity import PRODUCTION_ENV, LogType
from .helper import get_app_env

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}

_STATUS_LEVELS = {
    LogType.ERROR: logging.ERROR,
    LogType.INFO: logging.INFO,
    LogType.DEBUG: logging.DEBUG,
}


def _iso8601(created: float) -> str:
    moment = datetime.fromtimestamp(created).astimezone()
    millis = moment.microsecond // 1000
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}" + moment.strftime("%z")


def _caller(record: logging.LogRecord) -> str:
    return f"{os.path.basename(record.pathname)}:{record.lineno}"


def _level(record: logging.LogRecord) -> str:
    return _LEVEL_NAMES.get(record.levelno, record.levelname.lower())


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": _level(record),
            "timestamp": _iso8601(record.created),
            "caller": _caller(record),
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "fields", None) or {})
        return json.dumps(entry, ensure_ascii=False, default=str)


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            _iso8601(record.created),
            _level(record).upper(),
            _caller(record),
            record.getMessage(),
        ]
        fields = getattr(record, "fields", None)
        if fields:
            parts.append(json.dumps(fields, ensure_ascii=False, default=str))
        return "\t".join(parts)


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _configure(name: str, handler: logging.Handler, formatter: logging.Formatter) -> logging.Logger:
    logger = logging.getLogger(name)
    _reset(logger)
    handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def development_logger() -> logging.Logger:
    """A human-readable logger writing to standard error."""
    return _configure("todoskel.development", logging.StreamHandler(sys.stderr), _ConsoleFormatter())


def production_logger(base_dir: str | os.PathLike[str] = ".") -> logging.Logger:
    """A JSON logger appending to storage/log/YYYY/MM/YYYY-MM-DD.log under base_dir."""
    now = datetime.now()
    folder = Path(base_dir) / "storage" / "log" / now.strftime("%Y") / now.strftime("%m")
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{now.strftime('%Y-%m-%d')}.log"
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    return _configure("todoskel.production", handler, _JsonFormatter())


def new_logger(env: str) -> logging.Logger:
    """Pick the file logger in quiet production, the console logger otherwise."""
    if env == PRODUCTION_ENV and os.environ.get("DEBUG_MODE") == "false":
        return production_logger()
    return development_logger()


def write_log_to_file(data: str, path: str | os.PathLike[str]) -> None:
    """Append text to a file, creating its directory when needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a", encoding="utf-8") as handle:
        handle.write(data)


def log(
    status: LogType | str,
    message: str,
    func_name: str,
    error: BaseException | str | None,
    log_fields: Mapping[str, str] | None,
    process_name: str,
) -> None:
    """Write one entry; only ERROR, INFO and DEBUG statuses are emitted."""
    logger = new_logger(get_app_env())
    try:
        level = _STATUS_LEVELS.get(status)
        if level is None:
            return
        fields = {
            "process": process_name,
            "funcName": func_name,
            "message": message,
            "errorMessage": "" if error is None else str(error),
            "logFields": None if log_fields is None else dict(log_fields),
        }
        logger.log(level, message, extra={"fields": fields}, stacklevel=3)
    finally:
        _reset(logger)


def log_error(
    process: str,
    func_name: str,
    error: BaseException | str | None,
    log_fields: Mapping[str, str] | None,
    message: str,
) -> None:
    log(LogType.ERROR, process, func_name, error, log_fields, process)


def log_info(
    process_name: str,
    func_name: str,
    log_fields: Mapping[str, str] | None,
    message: str,
) -> None:
    log(LogType.INFO, message, func_name, "", log_fields, process_name)


def log_warn(
    process_name: str,
    func_name: str,
    error: BaseException | str | None,
    log_fields: Mapping[str, str] | None,
    message: str,
) -> None:
    log(LogType.WARNING, message, func_name, error, log_fields, process_name)