"""Error hierarchy and error handling helpers."""

from .handling import handle_api_error, handle_retryable_error, log_error
from .internal import InternalError, NetworkError, ParsingError, ServiceError

__all__ = [
    "InternalError",
    "NetworkError",
    "ParsingError",
    "ServiceError",
    "handle_api_error",
    "handle_retryable_error",
    "log_error",
]
