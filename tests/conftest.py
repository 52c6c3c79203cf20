from __future__ import annotations

import asyncio
import os

import pytest

from rustbot.bot.context import Context
from rustbot.irc.parser import IRCMessage, is_channel_name

# Keep structured log lines short and deterministic in test output
os.environ.setdefault("DEBUG", "false")

BOT_NICK = "rustbot"
DEFAULT_PREFIX = "alice!alice@example.org"


class FakeChatClient:
    """Chat capability double recording every outgoing message."""

    def __init__(self, nickname: str = BOT_NICK) -> None:
        self.nickname = nickname
        self.sent: list[tuple[str, str, str]] = []

    def current_nickname(self) -> str:
        return self.nickname

    def is_channel_name(self, target: str) -> bool:
        return is_channel_name(target)

    async def send_notice(self, target: str, text: str) -> None:
        await asyncio.sleep(0)
        self.sent.append(("NOTICE", target, text))

    async def send_privmsg(self, target: str, text: str) -> None:
        await asyncio.sleep(0)
        self.sent.append(("PRIVMSG", target, text))

    @property
    def texts(self) -> list[str]:
        return [text for _, _, text in self.sent]


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def make_message():
    def _make(
        body: str, target: str = "#rust", prefix: str | None = DEFAULT_PREFIX
    ) -> IRCMessage:
        raw = f":{prefix} PRIVMSG {target} :{body}" if prefix else f"PRIVMSG {target} :{body}"
        return IRCMessage(raw=raw, prefix=prefix, command="PRIVMSG", params=[target, body])

    return _make


@pytest.fixture
def make_context(chat_client, make_message):
    def _make(body: str, target: str = "#rust") -> Context:
        ctx = Context.from_message(chat_client, make_message(body, target))
        assert ctx is not None
        return ctx

    return _make
