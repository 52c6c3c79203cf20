"""Usage help."""

from __future__ import annotations

from ..bot.command_registry import CommandRegistry
from ..bot.context import Context
from ..bot.flow import Flow
from .base import Module

HELP_LINES = (
    "{nick}: [--stable|--beta|--nightly] [--debug|--release] [--bare] <code> "
    "runs <code> on the playground; {nick}: --version shows the toolchain version",
    "{prefix}crate <name> describes a crate, {prefix}docs <name> links its docs; "
    "commands also work inline as {{{{{prefix}crate <name>}}}}",
)


async def display_help(ctx: Context, command_prefix: str) -> None:
    for line in HELP_LINES:
        await ctx.reply(line.format(nick=ctx.current_nickname, prefix=command_prefix))


class Help(Module):
    def __init__(self) -> None:
        self.command_prefix = "?"

    def init(self, commands: CommandRegistry) -> None:
        self.command_prefix = commands.command_prefix
        commands.set_named_handler("help", self.help_handler)

    async def help_handler(self, ctx: Context, args: list[str]) -> Flow:
        await display_help(ctx, self.command_prefix)
        return Flow.BREAK
