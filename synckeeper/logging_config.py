"""
Logging Configuration — Console setup and per-run log files.

Provides consistent logging across all modules with:
- Human-readable, colour-highlighted console output (default)
- JSON console output for machine collection
- A per-run log file handler for mirror jobs

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: json, text (default: text)

## Usage

    from synckeeper.logging_config import setup_logging, attach_run_log

    setup_logging()  # Call once at startup

    handler = attach_run_log(log_file)
    try:
        ...
    finally:
        detach_run_log(handler)
"""

from __future__ import annotations

import codecs
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Level names as they appear in run logs and on the console
FATAL_LABEL = "FATAL"
WARN_LABEL = "WARN"

logging.addLevelName(logging.CRITICAL, FATAL_LABEL)

RUN_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def level_label(levelno: int) -> str:
    """Short label used in run log lines (WARN instead of WARNING)."""
    if levelno == logging.WARNING:
        return WARN_LABEL
    return logging.getLevelName(levelno)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level_label(record.levelno),
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Job context, when the runner attached it
        if hasattr(record, "job"):
            log_entry["job"] = record.job
        if hasattr(record, "exit_code"):
            log_entry["exit_code"] = record.exit_code

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Human-readable log formatter for terminals.

    Output format:
    12:34:56 WARN    [rotation       ] Message
    """

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARN": "\033[33m",     # Yellow
        "ERROR": "\033[31m",    # Red
        "FATAL": "\033[35m",    # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.now().strftime("%H:%M:%S")

        level = level_label(record.levelno)
        if sys.stderr.isatty():
            color = self.COLORS.get(level, "")
            level = f"{color}{level:7}{self.RESET}"
        else:
            level = f"{level:7}"

        module = record.name.split(".")[-1][:15]

        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        return f"{time_str} {level} [{module:15}] {msg}"


class RunLogFormatter(logging.Formatter):
    """
    Plain line format for the per-run log file.

    Output format:
    2026-01-31 02:00:00 [WARN] Message
    """

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime(RUN_LOG_DATEFMT)
        return f"{ts} [{level_label(record.levelno)}] {record.getMessage()}"


class ConsoleLevelFilter(logging.Filter):
    """
    Let DEBUG and WARN-or-worse through to the console.

    INFO lines are routine progress and only go to the run log file.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == logging.DEBUG or record.levelno >= logging.WARNING


class RunLogHandler(logging.Handler):
    """
    Append records to one run's log file.

    The file is opened per record so that an external tool may rewrite
    it between our writes. Write failures go through handleError and
    never propagate to the caller.
    """

    def __init__(self, path: Path, level: int = logging.DEBUG):
        super().__init__(level)
        self.path = Path(path)
        self.failures = 0
        self.previous_level = logging.NOTSET
        self.setFormatter(RunLogFormatter())

    def _encoding(self) -> str:
        # robocopy /UNILOG writes UTF-16LE with a BOM; keep appending in kind
        try:
            with self.path.open("rb") as f:
                bom = f.read(2)
        except FileNotFoundError:
            return "utf-8"
        return "utf-16-le" if bom == codecs.BOM_UTF16_LE else "utf-8"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with self.path.open("a", encoding=self._encoding()) as f:
                f.write(line + "\n")
        except OSError:
            self.failures += 1
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        sys.stderr.write(f"synckeeper: could not append to run log {self.path}\n")


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
) -> None:
    """
    Configure console logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
               Defaults to LOG_LEVEL env var or INFO.
        format_type: Output format (json, text).
                     Defaults to LOG_FORMAT env var or text.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()

    numeric_level = getattr(logging, log_level, logging.INFO)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    # ConsoleLevelFilter drops INFO; DEBUG stays visible unless a stricter level is asked for
    handler.setLevel(logging.DEBUG if numeric_level <= logging.INFO else numeric_level)
    handler.addFilter(ConsoleLevelFilter())
    root.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )


PACKAGE_LOGGER = "synckeeper"


def attach_run_log(path: Path, logger: Optional[logging.Logger] = None) -> RunLogHandler:
    """
    Attach a RunLogHandler for the duration of one run.

    The handler goes on the package logger, which is opened up to DEBUG
    so the file sees every record regardless of the console threshold.
    """
    target = logger or logging.getLogger(PACKAGE_LOGGER)
    handler = RunLogHandler(path)
    handler.previous_level = target.level
    target.setLevel(logging.DEBUG)
    target.addHandler(handler)
    return handler


def detach_run_log(handler: RunLogHandler, logger: Optional[logging.Logger] = None) -> None:
    """Remove a handler added by attach_run_log."""
    target = logger or logging.getLogger(PACKAGE_LOGGER)
    target.removeHandler(handler)
    target.setLevel(handler.previous_level)
    handler.close()

