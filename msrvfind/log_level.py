"""Log levels accepted on the command line."""

from __future__ import annotations

import enum
import logging
import re

from msrvfind.errors import CargoMsrvError

TRACE = 5
"""Numeric logging level used for trace output, below DEBUG."""


class ParseLogLevelError(CargoMsrvError, ValueError):
    """The given text names no log level."""

    def __init__(self, given_input: str, valid_options_formatted: str) -> None:
        self.given_input = given_input
        self.valid_options_formatted = valid_options_formatted
        super().__init__(
            f"The given log level '{given_input}' does not exist, "
            f"valid options are: {valid_options_formatted}]"
        )


class LogLevel(enum.Enum):
    """Severity threshold for log output."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, text: str) -> "LogLevel":
        """Parse a level from a number 1-5 (error to trace) or a case-insensitive name."""
        if re.fullmatch(r"\+?[0-9]+", text) and int(text) <= 255:
            level = _NUMERIC_LEVELS.get(int(text))
            if level is not None:
                return level
        if text.isascii():
            lowered = text.lower()
            for level in cls:
                if level.value == lowered:
                    return level
        raise ParseLogLevelError(text, ",".join(level.value for level in cls))

    def to_logging_level(self) -> int:
        """The matching level of the logging module."""
        return _LOGGING_LEVELS[self]


DEFAULT_LOG_LEVEL = LogLevel.INFO

_NUMERIC_LEVELS = {
    1: LogLevel.ERROR,
    2: LogLevel.WARN,
    3: LogLevel.INFO,
    4: LogLevel.DEBUG,
    5: LogLevel.TRACE,
}

_LOGGING_LEVELS = {
    LogLevel.TRACE: TRACE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}