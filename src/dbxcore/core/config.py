r"""Configuration dataclass and defaults for the request executor.

This module provides the endpoint constants, the retry defaults and the
immutable ``Config`` object shared by every call of a client.
"""

from __future__ import annotations

__all__ = [
    "API_HOST",
    "API_VERSION_PREFIX",
    "BACKOFF_MULTIPLIER",
    "CONTENT_HOST",
    "DEFAULT_NUM_WORKERS",
    "DEFAULT_QUEUE_SIZE",
    "DEFAULT_RETRY_AFTER",
    "DEFAULT_TIMEOUT",
    "INITIAL_BACKOFF",
    "MAX_BACKOFF",
    "Config",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import httpx

from dbxcore.core.validation import (
    validate_access_token,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from dbxcore.backoff import BaseBackoffStrategy
    from dbxcore.callbacks import FailureInfo, RetryInfo


# Host of the RPC endpoints (JSON in, JSON out)
API_HOST = "api.dropboxapi.com"

# Host of the content endpoints (JSON argument header, binary body)
CONTENT_HOST = "content.dropboxapi.com"

API_VERSION_PREFIX = "/2"

# Timeout in seconds of the default httpx.Client
DEFAULT_TIMEOUT = 30.0

# 5xx backoff: 0.5s, 0.75s, 1.125s, ... until the next wait would reach 300s
INITIAL_BACKOFF = 0.5
BACKOFF_MULTIPLIER = 1.5
MAX_BACKOFF = 300.0

# Wait in seconds for a 429 response without a usable Retry-After header
DEFAULT_RETRY_AFTER = 60.0

DEFAULT_NUM_WORKERS = 2
DEFAULT_QUEUE_SIZE = 64


def _default_http_client() -> httpx.Client:
    return httpx.Client(timeout=DEFAULT_TIMEOUT)


@dataclass(frozen=True)
class Config:
    """Configuration shared by all the calls of a client.

    The configuration is created once by the application and is
    read-only afterwards, so it can be shared between threads without
    synchronization.

    Args:
        access_token: The bearer token sent in the ``Authorization``
            header. ``bytes`` are accepted and decoded as ASCII.
        http_client: The reusable ``httpx.Client`` used to dispatch the
            requests. A client with ``DEFAULT_TIMEOUT`` is created if
            omitted.
        backoff_strategy: Optional strategy computing the 5xx waits.
            Defaults to ``ExponentialBackoff()`` (0.5s, x1.5).
        max_backoff: The 5xx retry loop stops once the next wait would
            reach this value.
        default_retry_after: Wait used for a 429 response without a
            usable ``Retry-After`` header.
        on_retry: Optional callback called before each backoff sleep.
        on_failure: Optional callback called before the executor
            raises ``ApiError``, ``TransportError`` or ``Canceled``.

    Example:
        ```pycon
        >>> from dbxcore.core.config import Config
        >>> config = Config(access_token="sl.abc")
        >>> config.max_backoff
        300.0
        >>> config.merge(max_backoff=10.0).max_backoff
        10.0

        ```
    """

    access_token: str
    http_client: httpx.Client = field(default_factory=_default_http_client, repr=False)
    backoff_strategy: BaseBackoffStrategy | None = None
    max_backoff: float = MAX_BACKOFF
    default_retry_after: float = DEFAULT_RETRY_AFTER
    on_retry: Callable[[RetryInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        if isinstance(self.access_token, (bytes, bytearray)):
            try:
                token = bytes(self.access_token).decode("ascii")
            except UnicodeDecodeError as exc:
                msg = "access_token must only contain ASCII characters"
                raise ValueError(msg) from exc
            object.__setattr__(self, "access_token", token)
        validate_access_token(self.access_token)
        validate_retry_params(
            max_backoff=self.max_backoff,
            default_retry_after=self.default_retry_after,
        )

    @classmethod
    def with_timeout(cls, access_token: str, timeout: float | httpx.Timeout, **kwargs: Any) -> Config:
        """Create a configuration with a new ``httpx.Client`` using the
        given timeout.

        Args:
            access_token: The bearer token.
            timeout: The timeout of the ``httpx.Client``. Must be > 0.
            **kwargs: Other ``Config`` fields.

        Returns:
            The new configuration.
        """
        validate_timeout(timeout)
        return cls(access_token=access_token, http_client=httpx.Client(timeout=timeout), **kwargs)

    def merge(self, **overrides: Any) -> Config:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied. The ``httpx.Client``
        is shared with the original configuration unless overridden.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new Config instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
