"""Leveled logging with a process-wide pluggable sink."""

from __future__ import annotations

import abc
import os
import re
import sys
import threading
from datetime import datetime
from enum import IntEnum
from typing import Any, TextIO

__all__ = [
    "Level",
    "Logger",
    "StreamLogger",
    "LoggingSession",
    "indicator",
    "debug_type",
    "elog",
    "log",
    "vlog",
    "dlog",
]


class Level(IntEnum):
    """Severity of a log message, from least to most important."""

    DEBUG = 0
    VERBOSE = 1
    INFO = 2
    ERROR = 3


_INDICATORS = {
    Level.DEBUG: "V",
    Level.VERBOSE: "I",
    Level.INFO: "I",
    Level.ERROR: "E",
}


def indicator(level: Level) -> str:
    """Return the single-letter marker printed before a message of this level."""
    return _INDICATORS[Level(level)]


def debug_type(filename: str) -> str:
    """Return the last component of a path using either kind of separator."""
    slash = filename.rfind("/")
    if slash != -1:
        return filename[slash + 1:]
    backslash = filename.rfind("\\")
    if backslash != -1:
        return filename[backslash + 1:]
    return filename


class Logger(abc.ABC):
    """A sink for formatted log messages."""

    @abc.abstractmethod
    def log(self, level: Level, message: str) -> None:
        """Record an already formatted message."""


class StreamLogger(Logger):
    """Writes timestamped messages at or above a minimum level to a stream."""

    def __init__(self, stream: TextIO, min_level: Level = Level.INFO) -> None:
        self.stream = stream
        self.min_level = Level(min_level)
        self._lock = threading.Lock()

    def log(self, level: Level, message: str) -> None:
        if level < self.min_level:
            return
        now = datetime.now()
        stamp = f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"
        line = f"{indicator(level)}[{stamp}] {os.getpid()}: {message}\n"
        with self._lock:
            self.stream.write(line)
            self.stream.flush()


_current: Logger | None = None
_fallback_lock = threading.Lock()


class LoggingSession:
    """Installs a logger as the process-wide sink for the duration of a block."""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger

    def __enter__(self) -> Logger:
        global _current
        if _current is not None:
            raise RuntimeError("a logging session is already active")
        _current = self.logger
        return self.logger

    def __exit__(self, exc_type, exc, tb) -> None:
        global _current
        _current = None


_PLACEHOLDER = re.compile(r"\{\{|\}\}|\{(\d+)(?:[,:][^}]*)?\}")


def _format(fmt: str, args: tuple[Any, ...]) -> str:
    def substitute(match: re.Match[str]) -> str:
        text = match.group(0)
        if text == "{{":
            return "{"
        if text == "}}":
            return "}"
        index = int(match.group(1))
        if index >= len(args):
            return text
        return str(args[index])

    return _PLACEHOLDER.sub(substitute, fmt)


def _emit(level: Level, fmt: str, args: tuple[Any, ...]) -> None:
    message = _format(fmt, args)
    logger = _current
    if logger is not None:
        logger.log(level, message)
        return
    with _fallback_lock:
        sys.stderr.write(message + "\n")


def elog(fmt: str, *args: Any) -> None:
    """Log an error; placeholders are written ``{0}``, ``{1}``, ..."""
    _emit(Level.ERROR, fmt, args)


def log(fmt: str, *args: Any) -> None:
    """Log high-level execution information."""
    _emit(Level.INFO, fmt, args)


def vlog(fmt: str, *args: Any) -> None:
    """Log low-level details."""
    _emit(Level.VERBOSE, fmt, args)


def dlog(fmt: str, *args: Any) -> None:
    """Log debugging details."""
    _emit(Level.DEBUG, fmt, args)