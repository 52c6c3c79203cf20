"""Message context, command parsing and dispatch."""

from .command import Command
from .command_registry import CommandRegistry, FallbackHandler, NamedHandler
from .context import Context
from .flow import Flow

__all__ = [
    "Command",
    "CommandRegistry",
    "Context",
    "FallbackHandler",
    "Flow",
    "NamedHandler",
]
