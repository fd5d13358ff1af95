r"""Callback types and data structures for observability.

Two lifecycle hooks can be set on ``Config``:

- on_retry: called before each sleep between two attempts
- on_failure: called before an ``ApiError``, ``TransportError`` or
  ``Canceled`` is raised

Callbacks are observational: they are not the channel through which
errors are surfaced, and an exception raised by a callback propagates
to the caller.

Example:
    ```pycon
    >>> from dbxcore.callbacks import RetryInfo
    >>> from dbxcore.core.config import Config
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retry #{info.attempt} of {info.url} in {info.wait_time}s")
    ...
    >>> config = Config(access_token="sl.abc", on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RetryInfo", "invoke_on_failure", "invoke_on_retry"]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method.
        attempt: The number of the attempt that is about to be made
            (1-indexed, so the first retry is attempt 2).
        wait_time: The sleep time in seconds before this retry.
        status_code: The HTTP status code that triggered the retry.
    """

    url: str
    method: str
    attempt: int
    wait_time: float
    status_code: int


@dataclass
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method.
        attempt: The number of attempts made, 0 when the call was
            canceled before its first dispatch.
        error: The exception about to be raised.
        status_code: The final HTTP status code (if any).
        total_time: Total time spent on all attempts including backoff.
    """

    url: str
    method: str
    attempt: int
    error: Exception
    status_code: int | None
    total_time: float


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    wait_time: float,
    status_code: int,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke.
        url: The URL being requested.
        method: The HTTP method.
        attempt: The number of attempts already made (1-indexed).
        wait_time: The sleep time before the next attempt.
        status_code: The status code that triggered the retry.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                wait_time=wait_time,
                status_code=status_code,
            )
        )


def invoke_on_failure(
    on_failure: Callable[[FailureInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    error: Exception,
    status_code: int | None,
    start_time: float,
) -> None:
    """Invoke on_failure callback if provided.

    Args:
        on_failure: Optional callback to invoke.
        url: The URL that was requested.
        method: The HTTP method.
        attempt: The number of attempts made (1-indexed).
        error: The exception about to be raised.
        status_code: The final status code, if a response was received.
        start_time: The ``time.monotonic()`` value at the start of the call.
    """
    if on_failure is not None:
        on_failure(
            FailureInfo(
                url=url,
                method=method,
                attempt=attempt,
                error=error,
                status_code=status_code,
                total_time=time.monotonic() - start_time,
            )
        )
