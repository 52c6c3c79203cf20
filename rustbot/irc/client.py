"""Async IRC client.

Owns the TCP (optionally TLS) connection, registration, channel joins and
outbound messages. Incoming PRIVMSG lines are handed to the message handler
set with :meth:`AsyncIRCClient.set_message_handler`.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import ssl
from collections.abc import Callable, Iterable
from typing import Any

from ..constants import IRC_CONNECT_MAX_ATTEMPTS, IRC_CONNECT_TIMEOUT, IRC_READ_CHUNK_SIZE
from ..errors.handling import handle_retryable_error
from ..errors.internal import NetworkError
from ..logs.logger import logger
from .dispatcher import IRCDispatcher
from .models import ConnectionState
from .parser import IRCMessage
from .parser import is_channel_name as _is_channel_name

MessageHandler = Callable[[IRCMessage], Any]


class AsyncIRCClient:  # pylint: disable=too-many-instance-attributes
    def __init__(
        self,
        *,
        server: str,
        port: int,
        nickname: str,
        channels: Iterable[str] = (),
        username: str | None = None,
        realname: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
    ):
        self.server = server
        self.port = port
        self.nickname = nickname
        self.username = username or nickname
        self.realname = realname or nickname
        self.password = password
        self.use_tls = use_tls
        self.channels = list(channels)
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.state = ConnectionState.DISCONNECTED
        self.running = False
        self.message_handler: MessageHandler | None = None
        self.message_buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._current_nickname = nickname
        self._write_lock = asyncio.Lock()
        self.dispatcher = IRCDispatcher(self)

    # ---- chat capability ----
    def current_nickname(self) -> str:
        return self._current_nickname

    def set_current_nickname(self, nickname: str) -> None:
        if nickname != self._current_nickname:
            logger.log_event(
                "irc",
                "nickname_changed",
                old_nickname=self._current_nickname,
                new_nickname=nickname,
            )
        self._current_nickname = nickname

    def is_channel_name(self, target: str) -> bool:
        return _is_channel_name(target)

    async def send_privmsg(self, target: str, text: str) -> None:
        for line in _split_lines(text):
            await self.send_raw(f"PRIVMSG {target} :{line}")

    async def send_notice(self, target: str, text: str) -> None:
        for line in _split_lines(text):
            await self.send_raw(f"NOTICE {target} :{line}")

    # ---- connection ----
    def set_message_handler(self, handler: MessageHandler) -> None:
        self.message_handler = handler

    def _set_state(self, new_state: ConnectionState):
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self._current_nickname,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    async def connect(self) -> None:
        """Open the connection and send the registration commands.

        Raises:
            NetworkError: If the server could not be reached after all attempts.
        """
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "irc",
            "connect_start",
            user=self._current_nickname,
            server=self.server,
            port=self.port,
        )
        try:
            self.reader, self.writer = await handle_retryable_error(
                self._open_connection,
                f"IRC connect to {self.server}:{self.port}",
                max_attempts=IRC_CONNECT_MAX_ATTEMPTS,
            )
        except NetworkError:
            self._set_state(ConnectionState.DISCONNECTED)
            raise
        self._current_nickname = self.nickname
        self._set_state(ConnectionState.REGISTERING)
        if self.password:
            await self.send_raw(f"PASS {self.password}")
        await self.send_raw(f"NICK {self._current_nickname}")
        await self.send_raw(f"USER {self.username} 0 * :{self.realname}")

    async def _open_connection(
        self, attempt: int
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        logger.log_event(
            "irc",
            "open_connection",
            level=logging.DEBUG,
            user=self._current_nickname,
            attempt=attempt,
            timeout=IRC_CONNECT_TIMEOUT,
        )
        ssl_context = ssl.create_default_context() if self.use_tls else None
        return await asyncio.wait_for(
            asyncio.open_connection(self.server, self.port, ssl=ssl_context),
            timeout=IRC_CONNECT_TIMEOUT,
        )

    async def on_registered(self) -> None:
        self._set_state(ConnectionState.READY)
        logger.log_event(
            "irc", "registered", user=self._current_nickname, server=self.server
        )
        for channel in self.channels:
            await self.join_channel(channel)

    async def on_nickname_in_use(self) -> None:
        if self.state == ConnectionState.READY:
            return
        self._current_nickname = f"{self._current_nickname}_"
        logger.log_event(
            "irc",
            "nickname_in_use",
            level=logging.WARNING,
            user=self._current_nickname,
        )
        await self.send_raw(f"NICK {self._current_nickname}")

    async def join_channel(self, channel: str) -> None:
        logger.log_event("irc", "join", user=self._current_nickname, channel=channel)
        await self.send_raw(f"JOIN {channel}")

    async def send_raw(self, message: str) -> None:
        if not self.writer:
            logger.log_event(
                "irc",
                "send_dropped",
                level=logging.WARNING,
                user=self._current_nickname,
                line=message,
            )
            return
        async with self._write_lock:
            self.writer.write(f"{message}\r\n".encode())
            await self.writer.drain()

    async def listen(self) -> None:
        """Read from the socket until the server closes the connection.

        Raises:
            NetworkError: If reading from the socket fails.
        """
        if not self.reader:
            raise NetworkError("listen() called before connect()")
        self.running = True
        try:
            while self.running:
                try:
                    data = await self.reader.read(IRC_READ_CHUNK_SIZE)
                except (ConnectionError, OSError) as e:
                    raise NetworkError(f"IRC read failed: {e}") from e
                if not data:
                    logger.log_event(
                        "irc", "connection_closed", level=logging.WARNING,
                        user=self._current_nickname,
                    )
                    break
                self.message_buffer = await self.dispatcher.process_incoming_data(
                    self.message_buffer, self._decoder.decode(data)
                )
        finally:
            await self.disconnect()

    async def run(self) -> None:
        """Connect and listen, reconnecting whenever the connection drops."""
        while True:
            await self.connect()
            try:
                await self.listen()
            except NetworkError as e:
                logger.log_event(
                    "irc",
                    "listen_error",
                    level=logging.ERROR,
                    user=self._current_nickname,
                    error=str(e),
                )
            await asyncio.sleep(1)

    async def disconnect(self) -> None:
        self.running = False
        if self.writer:
            try:
                self.writer.close()
                await self.writer.wait_closed()
            except (ConnectionError, OSError) as e:
                logger.log_event(
                    "irc",
                    "disconnect_error",
                    level=logging.DEBUG,
                    user=self._current_nickname,
                    error=str(e),
                )
            finally:
                self.writer = None
                self.reader = None
        self.message_buffer = ""
        self._decoder.reset()
        self._set_state(ConnectionState.DISCONNECTED)


def _split_lines(text: str) -> list[str]:
    # Outbound lines never carry CR or LF.
    return [line for line in text.replace("\r", "").split("\n") if line]
