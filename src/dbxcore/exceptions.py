r"""Define the exceptions raised by the request executor.

Every call ends in exactly one of: a ``Result``, ``ApiError``,
``TransportError`` (including ``DecodeError``), ``EncodeError``,
``BuildError`` or ``Canceled``.
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "BuildError",
    "Canceled",
    "DbxError",
    "DecodeError",
    "EncodeError",
    "TransportError",
]

from typing import Any


class DbxError(Exception):
    r"""Base class of all the errors raised by ``dbxcore``."""


class EncodeError(DbxError):
    r"""Raised when the call input cannot be encoded as a JSON document.

    No network traffic happened when this error is raised.
    """


class BuildError(DbxError):
    r"""Raised when the HTTP request cannot be built from a call.

    No network traffic happened when this error is raised.
    """


class TransportError(DbxError):
    """Raised when the HTTP round-trip failed.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: The error message.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from dbxcore.exceptions import TransportError
        >>> err = TransportError(
        ...     method="POST", url="https://api.dropboxapi.com/2/x", message="boom"
        ... )
        >>> err.method
        'POST'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.cause = cause


class DecodeError(TransportError):
    r"""Raised when an error response body is not the documented JSON
    error document.

    The server violated its contract, so this is reported as a transport
    level failure rather than as an ``ApiError``.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: The error message.
        status_code: The HTTP status code of the response.
        body: The raw response body.
        cause: The underlying decoding exception, if any.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int,
        body: bytes = b"",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(method=method, url=url, message=message, cause=cause)
        self.status_code = status_code
        self.body = body


class ApiError(DbxError):
    r"""Raised when the server answers with a status code >= 400.

    ``summary`` is either the verbatim ``text/plain`` body or the
    ``error_summary`` field of the JSON error document. ``error`` holds
    the opaque ``error`` field of that document (``None`` for text
    bodies) so that typed operation layers can pattern-match on it.

    Args:
        status: The HTTP reason phrase (e.g. ``"Conflict"``).
        status_code: The HTTP status code.
        summary: The human-readable error summary.
        error: The decoded ``error`` field, if any.
        method: The HTTP method of the request.
        url: The URL of the request.

    Example:
        ```pycon
        >>> from dbxcore.exceptions import ApiError
        >>> err = ApiError(status="Conflict", status_code=409, summary="path/not_found/")
        >>> str(err)
        '409 Conflict: path/not_found/'

        ```
    """

    def __init__(
        self,
        status: str,
        status_code: int,
        summary: str,
        error: Any = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(f"{status_code} {status}: {summary}")
        self.status = status
        self.status_code = status_code
        self.summary = summary
        self.error = error
        self.method = method
        self.url = url


class Canceled(DbxError):
    r"""Raised when the cancellation signal of a call fired or its
    deadline elapsed."""
