"""Crate lookups on crates.io."""

from __future__ import annotations

import logging
from urllib.parse import quote

from ..api.cratesio import CratesIOAPI
from ..api.models import Crate
from ..bot.command_registry import CommandRegistry
from ..bot.context import Context
from ..bot.flow import Flow
from ..errors.handling import log_error
from ..errors.internal import InternalError
from .base import Module


class Crates(Module):
    """Handlers for ``crate`` and ``docs``."""

    def __init__(self, api: CratesIOAPI) -> None:
        self.api = api

    def init(self, commands: CommandRegistry) -> None:
        commands.set_named_handler("crate", self.crate_handler)
        commands.set_named_handler("docs", self.docs_handler)

    async def crate_handler(self, ctx: Context, args: list[str]) -> Flow:
        if not args:
            await ctx.reply("Usage: crate <name>")
            return Flow.BREAK
        krate = await self._lookup(ctx, args[0])
        if krate is not None:
            description = " ".join(krate.description.split())
            await ctx.reply(
                f"{krate.name} ({krate.max_version}) - {description} "
                f"-> https://crates.io/crates/{quote(krate.id, safe='')}"
            )
        return Flow.BREAK

    async def docs_handler(self, ctx: Context, args: list[str]) -> Flow:
        if not args:
            await ctx.reply("Usage: docs <name>")
            return Flow.BREAK
        krate = await self._lookup(ctx, args[0])
        if krate is not None:
            await ctx.reply(f"https://docs.rs/crate/{quote(krate.id, safe='')}")
        return Flow.BREAK

    async def _lookup(self, ctx: Context, name: str) -> Crate | None:
        try:
            info = await self.api.crate_info(name)
        except InternalError as e:
            log_error(f"Failed to look up crate {name}", e, context={"crate": name})
            await ctx.reply(f"Could not find crate `{name}`")
            return None
        logging.debug(f"📦 crate lookup ok name={info.crate.name} version={info.crate.max_version}")
        return info.crate
