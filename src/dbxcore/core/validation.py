r"""Parameter validation utilities for the executor configuration.

This module provides validation functions to ensure the configuration
meets the required constraints before any request is dispatched.
"""

from __future__ import annotations

__all__ = ["validate_access_token", "validate_retry_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_access_token(access_token: str) -> None:
    """Validate the bearer access token.

    Args:
        access_token: The bearer token. Must be a non-empty ASCII string
            since it travels in the ``Authorization`` header.

    Raises:
        ValueError: If the token is empty, blank or not ASCII.

    Example:
        ```pycon
        >>> from dbxcore.core.validation import validate_access_token
        >>> validate_access_token("sl.abc")
        >>> validate_access_token("")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: access_token must be a non-empty string

        ```
    """
    if not isinstance(access_token, str) or not access_token.strip():
        msg = "access_token must be a non-empty string"
        raise ValueError(msg)
    if not access_token.isascii():
        msg = "access_token must only contain ASCII characters"
        raise ValueError(msg)


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_backoff: float,
    default_retry_after: float,
) -> None:
    """Validate retry parameters.

    Args:
        max_backoff: Cap on the 5xx backoff. Must be > 0.
        default_retry_after: Wait used for a 429 response without a
            usable ``Retry-After`` header. Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from dbxcore.core.validation import validate_retry_params
        >>> validate_retry_params(max_backoff=300.0, default_retry_after=60.0)

        ```
    """
    if max_backoff <= 0:
        msg = f"max_backoff must be > 0, got {max_backoff}"
        raise ValueError(msg)
    if default_retry_after < 0:
        msg = f"default_retry_after must be >= 0, got {default_retry_after}"
        raise ValueError(msg)
