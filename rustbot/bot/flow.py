"""Handler control signal."""

from __future__ import annotations

from enum import Enum


class Flow(Enum):
    """Returned by every handler.

    ``CONTINUE`` lets later handlers see the message, ``BREAK`` marks it as
    handled.
    """

    CONTINUE = "continue"
    BREAK = "break"
