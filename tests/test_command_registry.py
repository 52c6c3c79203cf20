from __future__ import annotations

import asyncio
from collections import Counter

import pytest

from rustbot.bot.command_registry import CommandRegistry
from rustbot.bot.context import Context
from rustbot.bot.flow import Flow
from rustbot.errors.internal import ParsingError
from rustbot.irc.parser import IRCMessage


class Recorder:
    """Builds handlers that count their invocations."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.order: list[str] = []
        self.args: dict[str, list[list[str]]] = {}

    def named(self, key: str, flow: Flow):
        async def handler(ctx: Context, args: list[str]) -> Flow:
            await asyncio.sleep(0)
            self.calls[key] += 1
            self.order.append(key)
            self.args.setdefault(key, []).append(list(args))
            return flow

        return handler

    def fallback(self, key: str, flow: Flow):
        async def handler(ctx: Context) -> Flow:
            await asyncio.sleep(0)
            self.calls[key] += 1
            self.order.append(key)
            return flow

        return handler


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def registry(chat_client) -> CommandRegistry:
    return CommandRegistry(chat_client, "?")


@pytest.mark.asyncio
async def test_primary_break_skips_inline_and_fallback(registry, recorder, make_message) -> None:
    registry.set_named_handler("a", recorder.named("a", Flow.BREAK))
    registry.set_named_handler("b", recorder.named("b", Flow.BREAK))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.BREAK))

    await registry.handle_message(make_message("?a x y {{?b}}"))

    assert recorder.calls == Counter({"a": 1})
    assert recorder.args["a"] == [["x", "y", "{{?b}}"]]


@pytest.mark.asyncio
async def test_primary_continue_runs_again_in_inline_phase(registry, recorder, make_message) -> None:
    registry.set_named_handler("a", recorder.named("a", Flow.CONTINUE))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.CONTINUE))

    await registry.handle_message(make_message("?a"))

    assert recorder.order == ["a", "a", "fb"]


@pytest.mark.asyncio
async def test_inline_dispatch_is_capped_at_three(registry, recorder, make_message) -> None:
    registry.set_named_handler("c", recorder.named("c", Flow.CONTINUE))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.CONTINUE))

    body = "look: {{?c 1}} {{?c 2}} {{?c 3}} {{?c 4}} {{?c 5}}"
    await registry.handle_message(make_message(body))

    assert recorder.calls["c"] == 3
    assert recorder.args["c"] == [["1"], ["2"], ["3"]]
    assert recorder.calls["fb"] == 1


@pytest.mark.asyncio
async def test_inline_phase_runs_to_completion_after_break(registry, recorder, make_message) -> None:
    registry.set_named_handler("stop", recorder.named("stop", Flow.BREAK))
    registry.set_named_handler("go", recorder.named("go", Flow.CONTINUE))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.BREAK))

    await registry.handle_message(make_message("{{?stop}} {{?go}} {{?go}}"))

    assert recorder.order == ["stop", "go", "go"]


@pytest.mark.asyncio
async def test_inline_break_skips_fallback(registry, recorder, make_message) -> None:
    registry.set_named_handler("a", recorder.named("a", Flow.CONTINUE))
    registry.set_named_handler("b", recorder.named("b", Flow.BREAK))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.BREAK))

    await registry.handle_message(make_message("?a {{?b}}"))

    assert recorder.calls["fb"] == 0
    assert recorder.calls["b"] == 1
    assert recorder.calls["a"] == 2


@pytest.mark.asyncio
async def test_fallbacks_run_in_order_until_break(registry, recorder, make_message) -> None:
    registry.add_fallback_handler(recorder.fallback("one", Flow.CONTINUE))
    registry.add_fallback_handler(recorder.fallback("two", Flow.BREAK))
    registry.add_fallback_handler(recorder.fallback("three", Flow.BREAK))

    await registry.handle_message(make_message("just chatting"))

    assert recorder.order == ["one", "two"]


@pytest.mark.asyncio
async def test_unknown_command_goes_to_fallback(registry, recorder, make_message) -> None:
    registry.set_named_handler("known", recorder.named("known", Flow.BREAK))
    registry.add_fallback_handler(recorder.fallback("fb", Flow.CONTINUE))

    await registry.handle_message(make_message("?unknown arg"))

    assert recorder.order == ["fb"]


@pytest.mark.asyncio
async def test_command_names_are_case_sensitive(registry, recorder, make_message) -> None:
    registry.set_named_handler("crate", recorder.named("crate", Flow.BREAK))
    await registry.handle_message(make_message("?Crate serde"))
    assert recorder.calls["crate"] == 0


@pytest.mark.asyncio
async def test_addressed_command_is_dispatched(registry, recorder, make_message) -> None:
    registry.set_named_handler("help", recorder.named("help", Flow.BREAK))
    await registry.handle_message(make_message("rustbot: ?help"))
    assert recorder.calls["help"] == 1


@pytest.mark.asyncio
async def test_set_named_handler_replaces_previous(registry, recorder, make_message) -> None:
    registry.set_named_handler("x", recorder.named("old", Flow.BREAK))
    registry.set_named_handler("x", recorder.named("new", Flow.BREAK))
    await registry.handle_message(make_message("?x"))
    assert recorder.order == ["new"]


@pytest.mark.asyncio
async def test_failing_handler_counts_as_continue(registry, recorder, make_message) -> None:
    async def broken(ctx: Context, args: list[str]) -> Flow:
        raise RuntimeError("boom")

    registry.set_named_handler("broken", broken)
    registry.add_fallback_handler(recorder.fallback("fb", Flow.BREAK))

    await registry.handle_message(make_message("?broken"))

    assert recorder.calls["fb"] == 1


@pytest.mark.asyncio
async def test_non_privmsg_is_ignored(registry, recorder) -> None:
    registry.add_fallback_handler(recorder.fallback("fb", Flow.BREAK))
    msg = IRCMessage(raw="JOIN #rust", prefix="alice!a@h", command="JOIN", params=["#rust"])
    await registry.handle_message(msg)
    assert recorder.calls["fb"] == 0


@pytest.mark.asyncio
async def test_raw_line_is_parsed(registry, recorder) -> None:
    registry.set_named_handler("crate", recorder.named("crate", Flow.BREAK))
    await registry.handle_message(":alice!a@h PRIVMSG #rust :?crate serde")
    assert recorder.args["crate"] == [["serde"]]


@pytest.mark.asyncio
async def test_malformed_raw_line_raises(registry) -> None:
    with pytest.raises(ParsingError):
        await registry.handle_message(":only-a-prefix")


@pytest.mark.asyncio
async def test_handlers_reply_through_context(registry, chat_client, make_message) -> None:
    async def echo(ctx: Context, args: list[str]) -> Flow:
        await ctx.reply(" ".join(args))
        return Flow.BREAK

    registry.set_named_handler("echo", echo)
    await registry.handle_message(make_message("?echo hello world", target="rustbot"))

    assert chat_client.sent == [("PRIVMSG", "alice", "hello world")]
