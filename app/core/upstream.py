"""Timeout and error translation for calls into Firebase services."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from app.config import settings
from app.core.exceptions import UpstreamException, UpstreamTimeoutException

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def call_upstream(
    operation: str,
    awaitable: Awaitable[T],
    timeout: float | None = None,
) -> T:
    """
    Await an upstream call with a deadline.

    Args:
        operation: Short name of the call, used in logs
        awaitable: Pending upstream call
        timeout: Seconds to wait (defaults to UPSTREAM_TIMEOUT_SECONDS)

    Returns:
        The call's result

    Raises:
        UpstreamTimeoutException: If the deadline passes
        UpstreamException: If the call raises
    """
    timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        logger.error("upstream_call_timed_out", operation=operation, timeout=timeout)
        raise UpstreamTimeoutException(f"{operation} timed out") from e
    except Exception as e:
        logger.error(
            "upstream_call_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise UpstreamException() from e


async def run_blocking(
    operation: str,
    func: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """Run a synchronous SDK call in a worker thread under call_upstream."""
    return await call_upstream(
        operation,
        asyncio.to_thread(func, *args, **kwargs),
        timeout=timeout,
    )
