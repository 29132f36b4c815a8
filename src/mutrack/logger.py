from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "mutrack"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Extra fields mutrack attaches to its records, rendered in this order
EVENT_FIELDS = ("event", "operation", "value_type", "error_type")


class EventFormatter(logging.Formatter):
    """Formatter that appends mutrack's structured extras to the message line.

    ``Mutation observed: append() on list (event=mutation_observed, operation=append())``
    """

    def __init__(self, fmt: str = DEFAULT_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        pairs = [f"{key}={record.__dict__[key]}" for key in EVENT_FIELDS if key in record.__dict__]
        if not pairs:
            return text
        # Keep any traceback below the annotated first line
        first, sep, rest = text.partition("\n")
        return f"{first} ({', '.join(pairs)}){sep}{rest}"


def get_logger(name: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name or LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    return logger


def configure_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Handler:
    """Send mutrack's records to ``stream`` (stderr by default).

    Replaces handlers installed by earlier calls and stops propagation to
    the root logger. Returns the installed handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(EventFormatter())
    logger.addHandler(handler)
    return handler
