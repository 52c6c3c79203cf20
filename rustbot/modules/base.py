"""Command module interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..bot.command_registry import CommandRegistry


class Module(ABC):
    """A group of handlers registered together at start-up."""

    @abstractmethod
    def init(self, commands: CommandRegistry) -> None:
        raise NotImplementedError
