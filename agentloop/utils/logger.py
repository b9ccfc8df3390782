"""
Logger Utility
==============

Diagnostic logging for the agent. Every component creates a context
logger (``Logger("Catalog")``, ``Logger("Retriever")``...) so a run reads
as a trace through the session:

    [2025-01-31T10:30:00] [INFO] [Catalog] Tool ready: fetch
    [2025-01-31T10:30:02] [WARN] [Events] tool_not_found
    {
      "tool_call_id": "call_1",
      "tool_name": "missing"
    }

All output goes to stderr. The CLI prints the task result on stdout, so
the two never mix when the result is piped somewhere.

Usage:
    from agentloop.utils.logger import Logger

    logger = Logger("Agent")
    logger.info("Session ready")
    logger.warning("Tool call failed", {"tool_name": "fetch"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """
    Log levels with numeric values for comparison.
    Higher values = more severe.
    """
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_level(name: str) -> LogLevel:
    """Map a level name (any case) to a LogLevel, defaulting to INFO."""
    return _LEVEL_NAMES.get(name.strip().upper(), LogLevel.INFO)


# Shared by every Logger so set_level() affects loggers created at import time
_min_level: LogLevel = parse_level(os.getenv("LOG_LEVEL", "INFO"))


def set_level(level: str | LogLevel) -> None:
    """
    Set the minimum level for all loggers.

    Args:
        level: A LogLevel or a name such as "debug" or "warn"
    """
    global _min_level
    _min_level = level if isinstance(level, LogLevel) else parse_level(level)


def get_level() -> LogLevel:
    return _min_level


def _use_color() -> bool:
    return sys.stderr.isatty() and not os.getenv("NO_COLOR")


class Logger:
    """
    A context-aware logger with colored output.

    Example:
        logger = Logger("Agent")
        logger.info("Starting round", {"round": 1})

        tool_logger = logger.child("Tools")
        # Logs will show [Agent:Tools]
    """

    def __init__(self, context: str = ""):
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is nested under this one."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level: str, message: str, color: str) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        if not _use_color():
            return f"[{timestamp}] [{level}] {context_str}{message}"

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < _min_level:
            return

        print(self._format_message(level_name, message, color), file=sys.stderr)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            if _use_color():
                data_str = f"{Colors.DIM}{data_str}{Colors.RESET}"
            print(data_str, file=sys.stderr)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message. Only shown when LOG_LEVEL=DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """
        Log a warning message.

        Warnings mark failures the session recovered from locally, such as
        a skipped tool call or a provider that did not start.

        Args:
            message: The warning message
            data: Optional structured data to log
        """
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: BaseException | None = None) -> None:
        """
        Log an error message.

        Args:
            message: The error message
            error: Optional exception to include details from
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
            code = getattr(error, "code", None)
            if code:
                data["error_code"] = code
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


logger = Logger("agentloop")
