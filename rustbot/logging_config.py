"""
Logging setup for rustbot.

Console output goes through colorlog. Failures reported with
:func:`log_structured_error` are counted per category and the counts are
logged once when the process exits.
"""

import atexit
import logging
import os
import sys
from collections import Counter
from typing import Any

import colorlog

ERROR_CATEGORIES = ("network", "service", "parsing", "internal", "unknown")


class ErrorCounter:
    """Per-category count of the failures seen by the bot."""

    def __init__(self) -> None:
        self.counts: Counter[str] = Counter()
        self.last_message: dict[str, str] = {}

    def record(self, category: str, message: str) -> None:
        if category not in ERROR_CATEGORIES:
            category = "unknown"
        self.counts[category] += 1
        self.last_message[category] = message

    def total(self) -> int:
        return sum(self.counts.values())

    def log_summary(self) -> None:
        if not self.counts:
            logging.info("📊 No errors recorded this session")
            return
        parts = ", ".join(
            f"{category}={self.counts[category]}"
            for category in ERROR_CATEGORIES
            if self.counts[category]
        )
        logging.warning(f"📊 Errors this session: {parts}")
        for category in ERROR_CATEGORIES:
            if category in self.last_message:
                logging.warning(f"    last {category}: {self.last_message[category]}")


error_counter = ErrorCounter()


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log a failure on one line and count it under its category.

    Args:
        error_type: One of ``network``, ``service``, ``parsing``, ``internal``;
            anything else is counted as ``unknown``.
        message: What failed.
        exception: The exception that was caught, if any.
        context: Extra ``key=value`` fields for the log line.
        level: Logging level (default: ERROR).
    """
    line = f"[{error_type.upper()}] {message}"
    if exception:
        line += f" | Exception: {type(exception).__name__}: {exception}"
    if context:
        line += " | Context: " + " | ".join(f"{k}={v}" for k, v in context.items())

    logging.log(level, line)
    error_counter.record(error_type, message)


class LoggerConfigurator:
    """Configures the root logger with colorlog.

    The ``DEBUG`` environment variable ('true', '1' or 'yes') selects DEBUG
    level, otherwise INFO.
    """

    def configure(self) -> None:
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
            reset=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root_logger = logging.getLogger()
        root_logger.handlers = [handler]
        root_logger.setLevel(log_level)

        # aiohttp client chatter stays out of the bot log
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

        atexit.register(error_counter.log_summary)
