"""Protocol definitions for the chat transport.

The dispatcher and the command modules only rely on this small capability
set, so they can be driven by the IRC client or by a test double.
"""

from __future__ import annotations

from typing import Protocol


class ChatClientProtocol(Protocol):
    """Capabilities a chat client offers to message contexts."""

    def current_nickname(self) -> str:
        """Nickname the bot is currently registered under."""
        ...

    def is_channel_name(self, target: str) -> bool:
        """Check whether a message target names a channel."""
        ...

    async def send_notice(self, target: str, text: str) -> None:
        """Send a NOTICE to a target."""
        ...

    async def send_privmsg(self, target: str, text: str) -> None:
        """Send a PRIVMSG to a target."""
        ...
