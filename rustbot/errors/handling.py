from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import aiohttp
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..logging_config import log_structured_error
from .internal import (
    InternalError,
    NetworkError,
    ParsingError,
    ServiceError,
)

T = TypeVar("T")


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The error is categorized from its type and forwarded to structured
    logging so repeated failures of one kind are aggregated.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    error_type = "unknown"
    if isinstance(error, NetworkError | OSError | ConnectionError):
        error_type = "network"
    elif isinstance(error, ServiceError):
        error_type = "service"
    elif isinstance(error, ParsingError):
        error_type = "parsing"
    elif isinstance(error, InternalError):
        error_type = "internal"

    log_structured_error(
        error_type=error_type,
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
    )


async def handle_api_error(operation: Callable[[], Awaitable[T]], context: str) -> T:
    """Run an HTTP operation and translate its failures into internal errors.

    Args:
        operation: The async API operation to execute.
        context: Descriptive context for the operation (e.g., "crates.io lookup").

    Returns:
        The result of the operation if successful.

    Raises:
        NetworkError: Connectivity problems and timeouts.
        ServiceError: The service answered with a non-success HTTP status.
        ParsingError: The response body could not be decoded.
        InternalError: Anything else the HTTP stack raised.
    """
    try:
        return await operation()
    except InternalError:
        raise
    except (
        aiohttp.ClientError,
        TimeoutError,
        ValueError,
        RuntimeError,
        OSError,
    ) as e:
        error_context: dict[str, object] = {"operation": context, "timestamp": time.time()}

        status = getattr(e, "status", None)
        if status is not None:
            error_context["http_status"] = status
        request_info = getattr(e, "request_info", None)
        if request_info is not None:
            error_context["url"] = str(request_info.real_url)

        # ContentTypeError subclasses ClientResponseError; check it first.
        if isinstance(e, aiohttp.ContentTypeError | ValueError):
            raise ParsingError(
                f"Malformed response in {context}. Error: {str(e)}",
                data=error_context,
            ) from e
        if isinstance(e, aiohttp.ClientResponseError):
            raise ServiceError(
                f"{context} failed with HTTP {e.status}", status=e.status
            ) from e
        if isinstance(e, aiohttp.ClientError | TimeoutError | OSError):
            raise NetworkError(
                f"Network connectivity issue in {context}. Error: {str(e)}",
                data=error_context,
            ) from e
        raise InternalError(
            f"Unexpected error in {context}. Error: {str(e)}", data=error_context
        ) from e


async def handle_retryable_error(
    operation: Callable[[int], Awaitable[T]],
    context: str,
    max_attempts: int = 3,
) -> T:
    """Run a network operation with Tenacity-based exponential backoff.

    Only used to establish the IRC connection; the HTTP services are never
    retried.

    Args:
        operation: Async callable receiving the attempt number.
        context: Descriptive context for the operation.
        max_attempts: Maximum number of attempts.

    Returns:
        The result if successful.

    Raises:
        NetworkError: If every attempt failed.
    """
    attempt_count = 0

    def before_retry(retry_state):
        nonlocal attempt_count
        attempt_count = retry_state.attempt_number
        if attempt_count > 1:
            logging.info(f"Retrying {context} (attempt {attempt_count})")

    def after_retry(retry_state):
        if retry_state.outcome.failed:
            log_error(
                f"Attempt {attempt_count} failed for {context}",
                retry_state.outcome.exception(),
                context={"attempt": attempt_count, "operation": context},
            )

    async def wrapped_operation() -> T:
        return await operation(attempt_count)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, max=60),
        retry=retry_if_exception_type((NetworkError, OSError, TimeoutError)),
        before=before_retry,
        after=after_retry,
        reraise=True,
    )

    try:
        return await retrying(wrapped_operation)
    except (NetworkError, OSError, TimeoutError) as e:
        raise NetworkError(
            f"{context} failed after {max_attempts} attempts. Error: {str(e)}",
            data={"max_attempts": max_attempts},
        ) from e
