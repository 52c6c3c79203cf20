"""IRC message parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors.internal import ParsingError

CHANNEL_PREFIXES = ("#", "&", "+", "!")


def is_channel_name(name: str) -> bool:
    return bool(name) and name[0] in CHANNEL_PREFIXES


@dataclass
class IRCMessage:
    """One parsed protocol line.

    ``params`` holds the middle parameters followed by the trailing parameter
    (the part after `` :``), so for ``PRIVMSG #chan :hello there`` it is
    ``["#chan", "hello there"]``.
    """

    raw: str
    prefix: str | None
    command: str
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def source_nickname(self) -> str | None:
        """Nickname part of the prefix (``nick!user@host``), if any."""
        if not self.prefix:
            return None
        nickname = self.prefix.split("!", 1)[0].split("@", 1)[0]
        return nickname or None

    def response_target(self) -> str | None:
        """Where a reply to this message should go.

        Channel messages are answered in the channel, private messages are
        answered to their sender.
        """
        if self.command not in ("PRIVMSG", "NOTICE") or not self.params:
            return None
        target = self.params[0]
        if is_channel_name(target):
            return target
        return self.source_nickname


def parse_irc_message(raw_line: str) -> IRCMessage:
    """Parse a single line (without its CRLF terminator).

    Raises:
        ParsingError: If the line has no command.
    """
    tags: dict[str, str] = {}
    prefix: str | None = None
    trailing: str | None = None

    line = raw_line.rstrip("\r\n")

    if line.startswith("@"):
        if " " not in line:
            raise ParsingError("IRC line holds only tags", data={"raw": raw_line})
        tags_part, line = line.split(" ", 1)
        tags = _parse_tags(tags_part[1:])
        line = line.lstrip(" ")

    if line.startswith(":"):
        remainder = line[1:]
        if " " not in remainder:
            raise ParsingError("IRC line holds only a prefix", data={"raw": raw_line})
        prefix, line = remainder.split(" ", 1)
        line = line.lstrip(" ")

    if line.startswith(":"):
        raise ParsingError("IRC line has no command", data={"raw": raw_line})

    if " :" in line:
        line, trailing = line.split(" :", 1)

    parts = line.split()
    if not parts:
        raise ParsingError("IRC line has no command", data={"raw": raw_line})

    params = parts[1:]
    if trailing is not None:
        params.append(trailing)

    return IRCMessage(
        raw=raw_line, prefix=prefix, command=parts[0].upper(), params=params, tags=tags
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags
