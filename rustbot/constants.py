"""
Configuration constants for rustbot

This module contains the tunables used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# IRC connection
IRC_CONNECT_TIMEOUT = _get_env_float("IRC_CONNECT_TIMEOUT", 15.0)
IRC_CONNECT_MAX_ATTEMPTS = _get_env_int("IRC_CONNECT_MAX_ATTEMPTS", 5)
IRC_READ_CHUNK_SIZE = _get_env_int("IRC_READ_CHUNK_SIZE", 4096)

# Dispatch
# Inline contexts consumed per message on top of the primary context
INLINE_CONTEXT_LIMIT = 3

# Playground output pagination
PLAYGROUND_STDOUT_LINES = 2
PLAYGROUND_STDERR_LINES = 1
PLAYGROUND_HASH_LENGTH = 9

# HTTP
HTTP_REQUEST_TIMEOUT = _get_env_float("HTTP_REQUEST_TIMEOUT", 30.0)
HTTP_USER_AGENT = os.getenv("HTTP_USER_AGENT", "rustbot/0.1")
