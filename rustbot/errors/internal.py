"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the HTTP service clients and
the IRC transport. Never surface raw aiohttp / JSON errors to handlers; wrap
them instead so every module catches the same small set of types.

Classes:
  InternalError        – Base for all internal errors.
  NetworkError         – Transient network/IO issues.
  ParsingError         – Response or protocol parsing / schema issues.
  ServiceError         – Remote service answered with a non-success status.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    This includes connection timeouts, resets, DNS failures and closed
    sockets, both for HTTP services and the IRC connection.
    """


class ParsingError(InternalError):
    """Exception raised for parsing or schema validation errors.

    Raised for malformed JSON bodies from the HTTP services and for raw IRC
    lines that cannot be parsed into a message.
    """


class ServiceError(InternalError):
    """Exception raised when a remote service replies with an error status.

    Args:
        message: Error message.
        status: HTTP status code returned by the service.
    """

    def __init__(self, message: str, *, status: int) -> None:
        super().__init__(message, data={"status": status})
        self.status = status


__all__ = [
    "InternalError",
    "NetworkError",
    "ParsingError",
    "ServiceError",
]
