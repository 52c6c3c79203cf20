"""Prefix command parsing."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Command:
    name: str
    args: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, prefix: str, body: str) -> Command | None:
        """Split ``body`` into a command name and arguments.

        Returns None when ``body`` does not start with ``prefix`` or nothing
        follows the prefix. Arguments are plain whitespace separated words;
        there is no quoting or escaping.
        """
        if not body.startswith(prefix):
            return None
        words = body[len(prefix):].split()
        if not words:
            return None
        return cls(name=words[0], args=words[1:])
