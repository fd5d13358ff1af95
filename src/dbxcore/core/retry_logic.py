r"""Retry decision logic of the executor.

A response is retryable when its status is 429 (rate limited) or >= 500
(server error). ``RetryState`` holds the per-call backoff state and
decides, for each retryable response, how long to wait or whether the
response has to be treated as terminal.
"""

from __future__ import annotations

__all__ = ["RATE_LIMIT_STATUS", "RetryState", "is_retryable_status"]

import logging
from typing import TYPE_CHECKING

from dbxcore.backoff import ExponentialBackoff
from dbxcore.core.config import BACKOFF_MULTIPLIER
from dbxcore.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    import httpx

    from dbxcore.core.config import Config

logger: logging.Logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429


def is_retryable_status(status_code: int) -> bool:
    """Indicate if a status code triggers a retry.

    Args:
        status_code: The HTTP status code.

    Returns:
        ``True`` for 429 and every status >= 500.

    Example:
        ```pycon
        >>> from dbxcore.core.retry_logic import is_retryable_status
        >>> is_retryable_status(429), is_retryable_status(503), is_retryable_status(409)
        (True, True, False)

        ```
    """
    return status_code == RATE_LIMIT_STATUS or status_code >= 500


class RetryState:
    """Per-call retry state.

    The state lives for a single execution and is discarded when the
    call completes.

    - 429: wait the integer ``Retry-After`` value, or
      ``config.default_retry_after`` when absent or unparseable. Rate
      limited responses are always retried; ``Call.max_total_time``
      bounds the overall wait.
    - >= 500: wait the current backoff (0.5s, then x1.5 by default).
      Once the next wait would reach ``config.max_backoff``, the
      response is terminal. The cumulative 5xx waits are also bounded
      by ``max_backoff * (1 + 1.5)`` so that capped strategies end too.

    Args:
        config: The configuration of the call.

    Example:
        ```pycon
        >>> import httpx
        >>> from dbxcore.core.config import Config
        >>> from dbxcore.core.retry_logic import RetryState
        >>> state = RetryState(Config(access_token="sl.abc"))
        >>> [state.next_wait(httpx.Response(503)) for _ in range(3)]
        [0.5, 0.75, 1.125]
        >>> state.next_wait(httpx.Response(429, headers={"Retry-After": "7"}))
        7.0

        ```
    """

    def __init__(self, config: Config) -> None:
        self._strategy = config.backoff_strategy or ExponentialBackoff()
        self._max_backoff = config.max_backoff
        self._max_server_error_wait = config.max_backoff * (1 + BACKOFF_MULTIPLIER)
        self._default_retry_after = config.default_retry_after
        self.attempts = 0
        self.server_errors = 0
        self.server_error_wait = 0.0
        self.rate_limit_wait = 0.0

    @property
    def backoff(self) -> float:
        r"""The wait that the next server error would trigger."""
        return self._strategy.calculate(self.server_errors)

    def next_wait(self, response: httpx.Response) -> float | None:
        """Compute the wait before retrying a response.

        The state is updated as if the wait is taken.

        Args:
            response: The response of the last attempt.

        Returns:
            The wait in seconds, or ``None`` if the response is terminal:
            either not retryable or past the 5xx backoff cap.
        """
        self.attempts += 1
        status_code = response.status_code
        if status_code == RATE_LIMIT_STATUS:
            return self._next_rate_limit_wait(response)
        if status_code >= 500:
            return self._next_server_error_wait(status_code)
        return None

    def _next_rate_limit_wait(self, response: httpx.Response) -> float:
        wait = parse_retry_after(response.headers.get("Retry-After"))
        if wait is None:
            logger.debug(
                f"No usable Retry-After header, waiting the default {self._default_retry_after:.2f}s"
            )
            wait = self._default_retry_after
        self.rate_limit_wait += wait
        return wait

    def _next_server_error_wait(self, status_code: int) -> float | None:
        wait = self.backoff
        if wait >= self._max_backoff or self.server_error_wait + wait > self._max_server_error_wait:
            logger.debug(
                f"Backoff cap reached after status {status_code} "
                f"(next wait {wait:.2f}s, cap {self._max_backoff:.2f}s)"
            )
            return None
        self.server_errors += 1
        self.server_error_wait += wait
        return wait
