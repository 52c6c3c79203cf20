"""IRC subsystem package.

Contains the connection/client, line dispatcher and message parser used as
the chat transport of the bot.
"""

from .client import AsyncIRCClient  # noqa: F401
from .dispatcher import IRCDispatcher  # noqa: F401
from .models import ConnectionState  # noqa: F401
from .parser import IRCMessage, is_channel_name, parse_irc_message  # noqa: F401

__all__ = [
    "AsyncIRCClient",
    "ConnectionState",
    "IRCDispatcher",
    "IRCMessage",
    "is_channel_name",
    "parse_irc_message",
]
