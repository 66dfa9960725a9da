#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging configuration for the csv2geojson package.
Provides structured logging setup with JSON formatting for machine readability
and console formatting for human readability.
Uses Python 3.10+ type annotations.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from csv2geojson.errors import ConfigurationError

# Determine if we're in a production environment
IS_PRODUCTION = os.environ.get("ENVIRONMENT", "").lower() == "production"

# Default logging level
DEFAULT_LOG_LEVEL = logging.WARNING

# Attributes every LogRecord has; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset([
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "id", "levelname", "levelno", "lineno", "module",
    "msecs", "message", "msg", "name", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "taskName",
    "thread", "threadName"
])


# Console colors for better readability in interactive mode
class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    GRAY = "\033[37m"


class JSONFormatter(logging.Formatter):
    """
    Custom log formatter that outputs JSON to make logs machine-readable.
    """
    def __init__(self, include_timestamp: bool = True) -> None:
        """
        Initialize the JSON formatter.

        Args:
            include_timestamp: Whether to include a timestamp in the logs
        """
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.fromtimestamp(record.created).isoformat()

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Custom log formatter for console output with colors.
    """
    DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s:%(funcName)s:%(lineno)d] %(message)s"

    LEVEL_COLORS = {
        "DEBUG": Colors.GRAY,
        "INFO": Colors.GREEN,
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.MAGENTA
    }

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None) -> None:
        """
        Initialize the console formatter.

        Args:
            use_colors: Whether to use colors in the output
            stream: Stream the output goes to (defaults to stderr); colors need it to be a TTY
        """
        super().__init__(fmt=self.DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors and (stream or sys.stderr).isatty()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record for console output, optionally with colors.

        Args:
            record: The log record to format

        Returns:
            Formatted log string
        """
        # Clone the record to avoid modifying the original
        record_copy = logging.makeLogRecord(record.__dict__)
        record_copy.exc_info = None
        record_copy.exc_text = None

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record_copy.levelname, "")
            if color:
                record_copy.levelname = f"{color}{record_copy.levelname}{Colors.RESET}"

        result = super().format(record_copy)

        # Indent the traceback for readability
        if record.exc_info:
            exception_text = self.formatException(record.exc_info)
            indented_traceback = "\n    ".join(exception_text.split("\n"))
            result += f"\n    {indented_traceback}"

        return result


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    json_output: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the logging system for the application.

    Console output goes to stderr so stdout only carries the command's own messages.

    Args:
        level: Logging level (name or number)
        json_output: Whether to output logs in JSON format
        log_file: Optional file to write logs to

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), DEFAULT_LOG_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    if json_output:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ConsoleFormatter(use_colors=not IS_PRODUCTION, stream=console_handler.stream))

    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).absolute()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Error setting up log file {log_file}: {str(e)}") from e

        file_handler.setLevel(level)
        # Always use JSON for file logging for better analysis
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    root_logger.debug(
        "Logging configured: level=%s, json=%s, file=%s",
        logging.getLevelName(level),
        json_output,
        log_file or "none"
    )
