"""Request/response models for the playground and crates.io services."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Channel(str, Enum):
    STABLE = "stable"
    BETA = "beta"
    NIGHTLY = "nightly"


class Mode(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"


class CrateType(str, Enum):
    BIN = "bin"


class ExecuteRequest(BaseModel):
    """Body of ``POST /execute``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    channel: Channel = Channel.STABLE
    mode: Mode = Mode.DEBUG
    crate_type: CrateType = Field(default=CrateType.BIN, alias="crateType")
    edition: str = "2021"
    tests: bool = False
    backtrace: bool = False

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ExecuteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    stdout: str = ""
    stderr: str = ""


class VersionResponse(BaseModel):
    """Toolchain version reported for one channel."""

    model_config = ConfigDict(frozen=True)

    version: str
    hash: str
    date: str


class PasteRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str


class PasteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str | None = None


class Crate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    max_version: str

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> Any:
        # Crates published without a description report null.
        return "" if v is None else v


class CrateInfo(BaseModel):
    """Decoded ``GET /api/v1/crates/{name}`` response."""

    model_config = ConfigDict(frozen=True)

    crate: Crate


__all__ = [
    "Channel",
    "Crate",
    "CrateInfo",
    "CrateType",
    "ExecuteRequest",
    "ExecuteResponse",
    "Mode",
    "PasteRequest",
    "PasteResponse",
    "VersionResponse",
]
