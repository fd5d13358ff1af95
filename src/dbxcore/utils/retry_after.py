r"""Retry-After header parsing utilities.

The service sends the ``Retry-After`` header of a 429 response as an
integer number of seconds.
"""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the Retry-After header value of a rate-limited response.

    Only the integer-seconds form is accepted. If parsing fails or the
    header is absent, ``None`` is returned so that the caller can use
    its default wait.

    Args:
        retry_after_header: The value of the Retry-After header as a string,
            or None if the header is not present in the response.

    Returns:
        The number of seconds to wait before retrying, or None if the
        header is absent or not a plain run of ASCII digits.

    Example:
        ```pycon
        >>> from dbxcore.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after(" 1 ")
        1.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("1.5") is None
        True
        >>> parse_retry_after("+5") is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    value = retry_after_header.strip()
    # Plain run of ASCII digits: no sign, underscore or non-ASCII digit
    if not (value.isascii() and value.isdigit()):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None
    return float(int(value))
