"""Incoming line handling for the IRC client."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING

from ..errors.internal import ParsingError
from ..logs.logger import logger
from .parser import IRCMessage, parse_irc_message

if TYPE_CHECKING:  # pragma: no cover
    from .client import AsyncIRCClient


class IRCDispatcher:
    def __init__(self, client: AsyncIRCClient):
        self.client = client
        self._tasks: set[asyncio.Task] = set()

    async def process_incoming_data(self, buffer: str, new_data: str) -> str:
        """Append data to the buffer and handle every complete line.

        Returns:
            The unterminated remainder of the buffer.
        """
        buffer += new_data
        while "\n" in buffer:
            line, buffer = buffer.split("\n", 1)
            line = line.rstrip("\r")
            if line.strip():
                await self._handle_irc_message(line)
        return buffer

    async def wait_idle(self) -> None:
        """Wait for every in-flight message handler task to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _handle_irc_message(self, raw_message: str):
        if not raw_message.startswith("PING"):
            logger.log_event(
                "irc",
                "raw",
                level=logging.DEBUG,
                user=self.client.current_nickname(),
                raw=raw_message,
            )

        try:
            parsed = parse_irc_message(raw_message)
        except ParsingError as e:
            logger.log_event(
                "irc",
                "parse_error",
                level=logging.WARNING,
                user=self.client.current_nickname(),
                error=str(e),
                raw=raw_message,
            )
            return

        command = parsed.command
        if command == "PING":
            await self._handle_ping(parsed)
        elif command == "001":
            await self._handle_welcome(parsed)
        elif command == "433":
            await self.client.on_nickname_in_use()
        elif command == "NICK":
            self._handle_nick_change(parsed)
        elif command == "PRIVMSG" and parsed.prefix:
            self._handle_privmsg(parsed)

    async def _handle_ping(self, parsed: IRCMessage):
        server = parsed.params[-1] if parsed.params else self.client.server
        await self.client.send_raw(f"PONG :{server}")

    async def _handle_welcome(self, parsed: IRCMessage):
        # The server echoes the nickname it actually registered us under.
        if parsed.params:
            self.client.set_current_nickname(parsed.params[0])
        await self.client.on_registered()

    def _handle_nick_change(self, parsed: IRCMessage):
        if parsed.source_nickname == self.client.current_nickname() and parsed.params:
            self.client.set_current_nickname(parsed.params[-1])

    def _handle_privmsg(self, parsed: IRCMessage):
        target = parsed.params[0] if parsed.params else None
        body = parsed.params[1] if len(parsed.params) > 1 else ""
        logger.log_event(
            "irc",
            "privmsg",
            level=logging.DEBUG,
            user=self.client.current_nickname(),
            channel=target,
            author=parsed.source_nickname,
            chat_message=body,
        )
        if not self.client.message_handler:
            logger.log_event(
                "irc",
                "no_message_handler",
                level=logging.WARNING,
                user=self.client.current_nickname(),
            )
            return
        # One task per message; a slow handler must not stall reading.
        task = asyncio.create_task(self._process_message_handler(parsed))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process_message_handler(self, parsed: IRCMessage):
        handler = self.client.message_handler
        try:
            result = handler(parsed)  # type: ignore[misc]
            if inspect.isawaitable(result):
                await result
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "message_handler_error",
                level=logging.ERROR,
                user=self.client.current_nickname(),
                error=str(e),
                error_type=type(e).__name__,
            )
