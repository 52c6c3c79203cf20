"""Event logging for the IRC transport and the dispatcher."""

from .logger import EVENT_TEMPLATES, BotLogger, logger

__all__ = ["BotLogger", "EVENT_TEMPLATES", "logger"]
