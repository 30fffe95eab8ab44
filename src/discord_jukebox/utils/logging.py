"""Console formatter for the jukebox's log output."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO


class ColoredFormatter(logging.Formatter):
    """Colours the levelname with ANSI codes and shortens package logger names.

    With ``strip_prefix="discord_jukebox"`` a record from
    ``discord_jukebox.application.reactors`` is shown as
    ``application.reactors``; loggers outside the package (``discord.*``,
    ``yt_dlp``) keep their full name.

    Colours are disabled when ``NO_COLOR`` is set or the stream is not a TTY.
    The record handed to ``format`` is never modified.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        *,
        stream: TextIO | None = None,
        strip_prefix: str | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style)  # type: ignore[arg-type]
        self._stream = stream
        self._strip_prefix = f"{strip_prefix}." if strip_prefix else None

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def _display_name(self, name: str) -> str:
        if self._strip_prefix and name.startswith(self._strip_prefix):
            return name[len(self._strip_prefix) :]
        return name

    def format(self, record: logging.LogRecord) -> str:
        use_color = self._use_color()
        name = self._display_name(record.name)
        if use_color or name != record.name:
            record = logging.makeLogRecord(record.__dict__)
            record.name = name
            if use_color:
                color = self.COLORS.get(record.levelno, "")
                record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
