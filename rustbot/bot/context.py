"""Per-message context derived from an incoming PRIVMSG."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field

from ..chat.protocols import ChatClientProtocol
from ..irc.parser import IRCMessage
from ..logs.logger import logger

CTCP_DELIMITER = "\x01"
ADDRESS_SEPARATORS = (":", ",")
INLINE_OPEN = "{{"
INLINE_CLOSE = "}}"

SendFn = Callable[[str, str], Awaitable[None]]


@dataclass(frozen=True)
class Context:
    """Everything a handler needs to know about one message.

    Attributes:
        body: Message text with CTCP framing and the bot's address removed.
        is_directly_addressed: True for private messages and for channel
            messages starting with the bot's nickname followed by ``:`` or ``,``.
        is_ctcp: True if the text was wrapped in ``\\x01`` bytes.
        source: Full prefix of the sender (``nick!user@host``).
        source_nickname: Nickname of the sender.
        target: Where replies go (the channel, or the sender for queries).
        current_nickname: The bot's nickname when the message arrived.
    """

    body: str
    is_directly_addressed: bool
    is_ctcp: bool
    source: str
    source_nickname: str
    target: str
    current_nickname: str
    client: ChatClientProtocol = field(repr=False, compare=False)
    send_fn: SendFn = field(repr=False, compare=False)

    @classmethod
    def from_message(
        cls, client: ChatClientProtocol, message: IRCMessage
    ) -> Context | None:
        """Derive a context, or None if the message is not a usable PRIVMSG."""
        if message.command != "PRIVMSG" or len(message.params) < 2:
            return None
        body = message.params[1].strip()

        source_nickname = message.source_nickname
        if source_nickname is None:
            return None

        is_ctcp = (
            len(body) >= 2
            and body.startswith(CTCP_DELIMITER)
            and body.endswith(CTCP_DELIMITER)
        )
        if is_ctcp:
            body = body[1:-1]

        source = message.prefix
        if not source:
            return None

        target = message.response_target()
        if not target:
            logger.log_event(
                "context",
                "unknown_response_target",
                level=logging.WARNING,
                source=source,
            )
            return None

        target_is_channel = client.is_channel_name(target)
        current_nickname = client.current_nickname()

        if body.startswith(current_nickname):
            rest = body[len(current_nickname):].lstrip()
            if rest.startswith(ADDRESS_SEPARATORS):
                body = rest[1:].lstrip()
                is_directly_addressed = True
            else:
                # "<nick>foo" and "<nick> foo" keep the nickname in the body.
                is_directly_addressed = False
        else:
            is_directly_addressed = not target_is_channel

        send_fn: SendFn = client.send_notice if target_is_channel else client.send_privmsg

        return cls(
            body=body,
            is_directly_addressed=is_directly_addressed,
            is_ctcp=is_ctcp,
            source=source,
            source_nickname=source_nickname,
            target=target,
            current_nickname=current_nickname,
            client=client,
            send_fn=send_fn,
        )

    async def reply(self, message: str) -> None:
        await self.send_fn(self.target, message)

    def inline_contexts(self) -> Iterator[Context]:
        """Yield a context for every ``{{ ... }}`` fragment in the body.

        Fragments are scanned left to right without nesting; blank fragments
        are skipped. Each derived context keeps this context's sender, reply
        target and addressing and only swaps the body. Callers decide how many
        to consume.
        """
        for fragment in iter_inline_fragments(self.body):
            yield dataclasses.replace(self, body=fragment)


def iter_inline_fragments(body: str) -> Iterator[str]:
    pos = 0
    while True:
        start = body.find(INLINE_OPEN, pos)
        if start == -1:
            return
        end = body.find(INLINE_CLOSE, start + len(INLINE_OPEN))
        if end == -1:
            return
        fragment = body[start + len(INLINE_OPEN):end].strip()
        pos = end + len(INLINE_CLOSE)
        if fragment:
            yield fragment
