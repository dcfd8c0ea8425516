"""Console logging helpers shared across voice_tools.

Everything here writes to stderr: stdout is reserved for the payload the
command line tools produce (transcripts or audio bytes).
"""

from __future__ import annotations

import logging
import shutil
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "voice_tools"

# ANSI escape sequences for colors
COLORS = {
    "black": "\u001b[30;1m",
    "red": "\u001b[31;1m",
    "green": "\u001b[32;1m",
    "yellow": "\u001b[33;1m",
    "blue": "\u001b[34;1m",
    "magenta": "\u001b[35;1m",
    "cyan": "\u001b[36;1m",
    "white": "\u001b[37;1m",
    "gray": "\u001b[90m",
    "reset": "\u001b[0m",
}

LEVEL_COLORS = {
    logging.DEBUG: "gray",
    logging.INFO: "cyan",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}

DEFAULT_TERMINAL_WIDTH = 80


def _is_tty(stream) -> bool:
    return bool(getattr(stream, "isatty", lambda: False)())


class ColorFormatter(logging.Formatter):
    """Formatter that wraps each record in an ANSI colour picked by level."""

    def __init__(self, fmt: str = "%(message)s", use_color: bool = True) -> None:
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        return f"{COLORS[color]}{message}{COLORS['reset']}"


def _package_logger(stream: Optional[TextIO] = None) -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        target = stream or sys.stderr
        handler = logging.StreamHandler(target)
        handler.setFormatter(ColorFormatter(use_color=_is_tty(target)))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger


def create_logger(name: str) -> logging.Logger:
    """
    Return a logger for ``name`` that reports through the package stderr handler.

    Names outside the ``voice_tools`` namespace are nested under it so the
    verbosity set by `configure_logging` applies to them as well.
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Set the package verbosity, optionally rebinding the handler to ``stream``.
    """
    logger = _package_logger()
    if stream is not None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ColorFormatter(use_color=_is_tty(stream)))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def _get_terminal_width() -> int:
    """Return current terminal width or a sensible default."""
    try:
        return shutil.get_terminal_size(fallback=(DEFAULT_TERMINAL_WIDTH, 0)).columns
    except OSError:
        return DEFAULT_TERMINAL_WIDTH


def dynamic_print(message, *, stream: Optional[TextIO] = None, persist: bool = False) -> None:
    """
    Print a status line that replaces the previous one.

    On a TTY the line is cleared first and long messages are truncated to the
    terminal width; multi-line messages are collapsed to a single line. When
    the stream is not a TTY the message is written as a plain line.

    Args:
        message: Text to display.
        stream: Optional stream to write to (defaults to sys.stderr).
        persist: When True the message is followed by a newline so it remains on screen.
    """
    stream = stream or sys.stderr
    text = str(message).replace("\n", " ").replace("\r", "")

    if not _is_tty(stream):
        stream.write(f"{text}\n")
        stream.flush()
        return

    terminal_width = max(_get_terminal_width(), 1)

    if terminal_width > 3 and len(text) > terminal_width - 3:
        text = text[: terminal_width - 3] + "..."
    elif len(text) > terminal_width:
        text = text[:terminal_width]

    # Clear the current line completely
    stream.write("\r" + " " * terminal_width)
    stream.flush()

    stream.write("\r" + text)
    if persist:
        stream.write("\n")
    stream.flush()


__all__ = [
    "COLORS",
    "ColorFormatter",
    "configure_logging",
    "create_logger",
    "dynamic_print",
]
