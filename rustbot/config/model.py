from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import HTTP_REQUEST_TIMEOUT


class BotConfig(BaseModel):
    """Connection and command settings of the bot.

    Attributes:
        server: IRC server host name.
        port: IRC server port.
        use_tls: Connect with TLS.
        nickname: Nickname requested at registration.
        username: IRC user name (defaults to the nickname).
        realname: IRC real name (defaults to the nickname).
        password: Optional server password sent with PASS.
        channels: Channels joined after registration.
        command_prefix: Prefix of named commands such as ``?crate``.
        playground_url: Base URL of the playground service.
        crates_io_url: Base URL of the crates.io API.
        http_timeout: Total timeout in seconds for one HTTP request.
    """

    server: str = Field(min_length=1)
    port: int = Field(default=6697, ge=1, le=65535)
    use_tls: bool = True
    nickname: str = Field(min_length=1, max_length=30)
    username: str | None = None
    realname: str | None = None
    password: str | None = None
    channels: list[str] = Field(default_factory=list)
    command_prefix: str = Field(default="?", min_length=1)
    playground_url: str = "https://play.rust-lang.org"
    crates_io_url: str = "https://crates.io/api/v1"
    http_timeout: float = Field(default=HTTP_REQUEST_TIMEOUT, gt=0)

    @field_validator("nickname")
    @classmethod
    def validate_nickname(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped or any(ch.isspace() for ch in stripped):
            raise ValueError("nickname must be a single word")
        return stripped

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        """Strip whitespace, add a missing '#' and drop duplicates keeping order."""
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list):
            raise ValueError("channels must be a list")
        validated = []
        for c in v:
            if isinstance(c, str):
                stripped = c.strip()
                if stripped:
                    validated.append(stripped if stripped[0] in "#&" else f"#{stripped}")
        return list(dict.fromkeys(validated))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BotConfig:
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
