"""Run code on the Rust playground.

Fallback handler: any message addressed to the bot that is not a known
command is treated as code, optionally preceded by flags::

    rustbot: --nightly --release println!("hi")
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..api.models import Channel, ExecuteRequest, ExecuteResponse, Mode
from ..api.playground import PlaygroundAPI
from ..bot.command_registry import CommandRegistry
from ..bot.context import Context
from ..bot.flow import Flow
from ..constants import PLAYGROUND_HASH_LENGTH, PLAYGROUND_STDERR_LINES, PLAYGROUND_STDOUT_LINES
from ..errors.handling import log_error
from ..errors.internal import InternalError
from .base import Module
from .help import display_help

# Leading crate-level attributes must stay outside of fn main().
CRATE_ATTRS = re.compile(r"^(\s*#!\[.*?\])*")

CODE_TEMPLATE = """\
#![allow(unreachable_code)]
{crate_attrs}

fn main() {{
    println!("{{:?}}", {{
        {code}
    }});
}}
"""

PASTE_TEMPLATE = """\
{code}

/*
~~~ Output ~~~

{stdout}

~~~ Errors ~~~

{stderr}
*/
"""

CHANNEL_FLAGS = {
    "--stable": Channel.STABLE,
    "--beta": Channel.BETA,
    "--nightly": Channel.NIGHTLY,
}
MODE_FLAGS = {"--debug": Mode.DEBUG, "--release": Mode.RELEASE}
VERSION_FLAGS = frozenset({"--version", "VERSION"})
BARE_FLAGS = frozenset({"--bare", "--mini"})
HELP_FLAGS = frozenset({"help", "h", "-h", "-help", "--help", "--h"})

BUILD_CHATTER = ("Compiling", "Finished", "Running")


@dataclass
class PlaygroundOptions:
    channel: Channel = Channel.STABLE
    mode: Mode = Mode.DEBUG
    show_version: bool = False
    bare: bool = False
    show_help: bool = False
    payload: str = ""


def parse_flags(body: str) -> PlaygroundOptions:
    """Consume leading flag words from ``body``.

    Parsing stops at the first word that is not a flag; that word starts the
    payload. A help word stops parsing immediately and is left in the payload.
    """
    options = PlaygroundOptions()
    while True:
        body = body.lstrip()
        words = body.split(maxsplit=1)
        flag = words[0] if words else ""

        if flag in CHANNEL_FLAGS:
            options.channel = CHANNEL_FLAGS[flag]
        elif flag in VERSION_FLAGS:
            options.show_version = True
        elif flag in BARE_FLAGS:
            options.bare = True
        elif flag in MODE_FLAGS:
            options.mode = MODE_FLAGS[flag]
        elif flag in HELP_FLAGS:
            options.show_help = True
            break
        else:
            break

        body = body[len(flag):]

    options.payload = body
    return options


def wrap_code(payload: str) -> str:
    """Embed ``payload`` into the main() template, hoisting crate attributes."""
    match = CRATE_ATTRS.match(payload)
    crate_attrs = match.group(0) if match else ""
    return CODE_TEMPLATE.format(crate_attrs=crate_attrs, code=payload[len(crate_attrs):])


def output_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def is_build_chatter(line: str) -> bool:
    return line.strip().startswith(BUILD_CHATTER)


class Playground(Module):
    def __init__(self, api: PlaygroundAPI) -> None:
        self.api = api
        self.command_prefix = "?"

    def init(self, commands: CommandRegistry) -> None:
        self.command_prefix = commands.command_prefix
        commands.add_fallback_handler(self.playground_handler)

    async def playground_handler(self, ctx: Context) -> Flow:
        if not ctx.is_directly_addressed:
            return Flow.CONTINUE

        options = parse_flags(ctx.body)

        if options.show_help:
            await display_help(ctx, self.command_prefix)
            return Flow.BREAK

        if options.show_version:
            await self.print_version(ctx, options.channel)
            return Flow.BREAK

        code = options.payload if options.bare else wrap_code(options.payload)
        request = ExecuteRequest(code=code, channel=options.channel, mode=options.mode)
        await self.execute(ctx, request)
        return Flow.BREAK

    async def print_version(self, ctx: Context, channel: Channel) -> None:
        try:
            resp = await self.api.version(channel)
        except InternalError as e:
            log_error("Failed to get version", e, context={"channel": channel.value})
            return
        await ctx.reply(f"{resp.version} ({resp.hash[:PLAYGROUND_HASH_LENGTH]} {resp.date})")

    async def execute(self, ctx: Context, request: ExecuteRequest) -> None:
        try:
            resp = await self.api.execute(request)
        except InternalError as e:
            log_error(
                "Failed to execute code",
                e,
                context={"channel": request.channel.value, "mode": request.mode.value},
            )
            return

        logging.debug(
            f"▶️ playground run success={resp.success} user={ctx.source_nickname} "
            f"stdout_len={len(resp.stdout)} stderr_len={len(resp.stderr)}"
        )

        output = resp.stdout if resp.success else resp.stderr
        take_count = PLAYGROUND_STDOUT_LINES if resp.success else PLAYGROUND_STDERR_LINES
        lines = output_lines(output)
        # Blank lines cannot be sent, so they do not take a reply slot.
        candidates = [line for line in lines if line.strip()]
        if not resp.success:
            candidates = [line for line in candidates if not is_build_chatter(line)]

        for line in candidates[:take_count]:
            await ctx.reply(line)

        if len(lines) > take_count:
            await self.paste_full_output(ctx, request, resp)

    async def paste_full_output(
        self, ctx: Context, request: ExecuteRequest, resp: ExecuteResponse
    ) -> None:
        code = PASTE_TEMPLATE.format(code=request.code, stdout=resp.stdout, stderr=resp.stderr)
        try:
            url = await self.api.paste(code, request.channel, request.mode)
        except InternalError as e:
            log_error("Failed to paste code", e)
            return
        await ctx.reply(f"~~~ Full output: {url}")
