"""Command modules.

Each module registers its handlers on the shared CommandRegistry during
start-up. Registration order decides fallback handler order.
"""

from __future__ import annotations

import aiohttp

from ..api.cratesio import CratesIOAPI
from ..api.playground import PlaygroundAPI
from ..bot.command_registry import CommandRegistry
from .base import Module
from .crates import Crates
from .help import Help, display_help
from .playground import Playground


def build_modules(
    session: aiohttp.ClientSession,
    *,
    playground_url: str | None = None,
    crates_io_url: str | None = None,
) -> list[Module]:
    return [
        Help(),
        Crates(CratesIOAPI(session, crates_io_url)),
        Playground(PlaygroundAPI(session, playground_url)),
    ]


def init_modules(commands: CommandRegistry, modules: list[Module]) -> None:
    for module in modules:
        module.init(commands)


__all__ = [
    "Crates",
    "Help",
    "Module",
    "Playground",
    "build_modules",
    "display_help",
    "init_modules",
]
