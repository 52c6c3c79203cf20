"""Command registry and per-message dispatch."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Awaitable, Callable

from ..chat.protocols import ChatClientProtocol
from ..constants import INLINE_CONTEXT_LIMIT
from ..errors.handling import log_error
from ..irc.parser import IRCMessage, parse_irc_message
from ..logs.logger import logger
from .command import Command
from .context import Context
from .flow import Flow

NamedHandler = Callable[[Context, list[str]], Awaitable[Flow]]
FallbackHandler = Callable[[Context], Awaitable[Flow]]


class CommandRegistry:
    """Maps command names to handlers and runs the dispatch protocol.

    Handlers are registered during start-up by the modules and the tables are
    only read afterwards, so concurrent ``handle_message`` calls need no
    locking.
    """

    def __init__(self, client: ChatClientProtocol, command_prefix: str = "?") -> None:
        self.client = client
        self.command_prefix = command_prefix
        self.named_handlers: dict[str, NamedHandler] = {}
        self.fallback_handlers: list[FallbackHandler] = []

    def set_named_handler(self, name: str, handler: NamedHandler) -> None:
        self.named_handlers[name] = handler

    def add_fallback_handler(self, handler: FallbackHandler) -> None:
        self.fallback_handlers.append(handler)

    async def handle_message(self, message: IRCMessage | str) -> None:
        """Dispatch one incoming message.

        1. The primary context goes to its named handler; BREAK ends dispatch.
        2. The primary context and up to three inline contexts are each
           dispatched to their named handler. All of them run; if any returned
           BREAK the message counts as handled.
        3. Otherwise the fallback handlers run in registration order until one
           returns BREAK.

        Raises:
            ParsingError: If ``message`` is a raw line that cannot be parsed.
        """
        if isinstance(message, str):
            message = parse_irc_message(message)

        context = Context.from_message(self.client, message)
        if context is None:
            return

        if await self._dispatch_named(context) == Flow.BREAK:
            return

        contexts = itertools.chain(
            (context,),
            itertools.islice(context.inline_contexts(), INLINE_CONTEXT_LIMIT),
        )
        any_inline_command_succeeded = False
        for inline_context in contexts:
            if await self._dispatch_named(inline_context) == Flow.BREAK:
                any_inline_command_succeeded = True

        if any_inline_command_succeeded:
            return

        for handler in self.fallback_handlers:
            if await self._invoke(handler, context) == Flow.BREAK:
                return

    async def _dispatch_named(self, context: Context) -> Flow | None:
        """Run the named handler matching the context body, if any.

        Returns:
            The handler's Flow, or None when the body is not a known command.
        """
        command = Command.parse(self.command_prefix, context.body)
        if command is None:
            return None
        handler = self.named_handlers.get(command.name)
        if handler is None:
            return None
        logger.log_event(
            "dispatch",
            "named_handler",
            level=logging.DEBUG,
            user=context.source_nickname,
            channel=context.target,
            command=command.name,
        )
        return await self._invoke(handler, context, command.args)

    async def _invoke(
        self,
        handler: Callable[..., Awaitable[Flow]],
        context: Context,
        *args: list[str],
    ) -> Flow:
        try:
            return await handler(context, *args)
        except Exception as e:  # noqa: BLE001
            log_error(
                "Command handler failed",
                e,
                context={
                    "handler": getattr(handler, "__qualname__", repr(handler)),
                    "body": context.body,
                },
            )
            return Flow.CONTINUE
