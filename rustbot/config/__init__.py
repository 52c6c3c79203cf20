"""Configuration package exports."""

from .loader import ConfigLoader, get_configuration
from .model import BotConfig
from .repository import ConfigRepository

__all__ = [
    "BotConfig",
    "ConfigLoader",
    "ConfigRepository",
    "get_configuration",
]
