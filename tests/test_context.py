from __future__ import annotations

import itertools

import pytest

from rustbot.bot.context import Context, iter_inline_fragments
from rustbot.irc.parser import IRCMessage


def test_non_privmsg_yields_no_context(chat_client) -> None:
    msg = IRCMessage(raw="", prefix="alice!a@h", command="NOTICE", params=["#rust", "hi"])
    assert Context.from_message(chat_client, msg) is None


def test_missing_prefix_yields_no_context(chat_client, make_message) -> None:
    assert Context.from_message(chat_client, make_message("hi", prefix=None)) is None


def test_body_is_trimmed(make_context) -> None:
    assert make_context("   hello there  ").body == "hello there"


@pytest.mark.parametrize("body", ["ACTION waves", "VERSION", "", "PING 1234"])
def test_ctcp_framing_is_removed(make_context, body: str) -> None:
    ctx = make_context(f"\x01{body}\x01", target="alice")
    assert ctx.is_ctcp is True
    assert ctx.body == body


def test_single_control_byte_is_not_ctcp(make_context) -> None:
    ctx = make_context("\x01")
    assert ctx.is_ctcp is False
    assert ctx.body == "\x01"


def test_ctcp_is_unwrapped_before_addressing(make_context) -> None:
    ctx = make_context("\x01rustbot: run\x01")
    assert ctx.is_ctcp is True
    assert ctx.is_directly_addressed is True
    assert ctx.body == "run"


@pytest.mark.parametrize("body", ["rustbot: foo", "rustbot, foo", "rustbot :foo", "rustbot,   foo"])
def test_nickname_with_separator_addresses_bot(make_context, body: str) -> None:
    ctx = make_context(body)
    assert ctx.is_directly_addressed is True
    assert ctx.body == "foo"


@pytest.mark.parametrize("body", ["rustbotfoo", "rustbot foo"])
def test_nickname_without_separator_is_left_in_body(make_context, body: str) -> None:
    ctx = make_context(body)
    assert ctx.is_directly_addressed is False
    assert ctx.body == body


def test_unprefixed_channel_message_is_not_addressed(make_context) -> None:
    ctx = make_context("foo")
    assert ctx.is_directly_addressed is False
    assert ctx.body == "foo"


@pytest.mark.parametrize("body", ["foo", "rustbot: foo", "someone: foo"])
def test_private_message_is_addressed(make_context, body: str) -> None:
    ctx = make_context(body, target="rustbot")
    assert ctx.is_directly_addressed is True


def test_private_message_with_bare_nickname_prefix_is_not_addressed(make_context) -> None:
    # The nickname check runs before the private message check.
    ctx = make_context("rustbotfoo", target="rustbot")
    assert ctx.is_directly_addressed is False
    assert ctx.body == "rustbotfoo"


def test_nickname_match_is_case_sensitive(make_context) -> None:
    ctx = make_context("RustBot: foo")
    assert ctx.is_directly_addressed is False
    assert ctx.body == "RustBot: foo"


def test_follows_current_nickname(chat_client, make_message) -> None:
    chat_client.nickname = "rustbot_"
    ctx = Context.from_message(chat_client, make_message("rustbot_: hi"))
    assert ctx is not None
    assert ctx.is_directly_addressed is True
    assert ctx.current_nickname == "rustbot_"


def test_source_fields(make_context) -> None:
    ctx = make_context("hi")
    assert ctx.source == "alice!alice@example.org"
    assert ctx.source_nickname == "alice"


@pytest.mark.asyncio
async def test_channel_reply_is_a_notice_to_channel(make_context, chat_client) -> None:
    ctx = make_context("hi", target="#rust")
    await ctx.reply("pong")
    assert chat_client.sent == [("NOTICE", "#rust", "pong")]


@pytest.mark.asyncio
async def test_private_reply_is_a_privmsg_to_sender(make_context, chat_client) -> None:
    ctx = make_context("hi", target="rustbot")
    assert ctx.target == "alice"
    await ctx.reply("pong")
    assert chat_client.sent == [("PRIVMSG", "alice", "pong")]


def test_inline_fragments_are_extracted_in_order() -> None:
    body = "see {{?crate serde}} and {{ ?docs tokio }} or {{}} {{  }} {{?help"
    assert list(iter_inline_fragments(body)) == ["?crate serde", "?docs tokio"]


def test_inline_fragments_do_not_nest() -> None:
    assert list(iter_inline_fragments("{{a {{b}} c}}")) == ["a {{b"]


@pytest.mark.asyncio
async def test_inline_contexts_inherit_reply_target(make_context, chat_client) -> None:
    ctx = make_context("rustbot: try {{?crate rand}}")
    inline = list(ctx.inline_contexts())
    assert [c.body for c in inline] == ["?crate rand"]
    assert inline[0].target == ctx.target
    assert inline[0].is_directly_addressed is True
    await inline[0].reply("x")
    assert chat_client.sent == [("NOTICE", "#rust", "x")]


def test_inline_contexts_are_lazy(make_context) -> None:
    ctx = make_context("".join(f"{{{{?c {i}}}}}" for i in range(100)))
    first = list(itertools.islice(ctx.inline_contexts(), 3))
    assert [c.body for c in first] == ["?c 0", "?c 1", "?c 2"]
