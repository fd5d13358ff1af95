r"""HTTP response handling utilities.

This module provides the functions that release retried responses and
classify terminal responses into a ``Result`` or a typed error.
"""

from __future__ import annotations

__all__ = ["classify_response", "decode_error_body", "drain_response"]

import json
import logging
from typing import Any

import httpx

from dbxcore.exceptions import ApiError, DecodeError, TransportError
from dbxcore.result import Result
from dbxcore.utils.structured_logging import log_structured

logger: logging.Logger = logging.getLogger(__name__)

# Status used by the service to carry typed application-level errors
APPLICATION_ERROR_STATUS = 409

# Number of body bytes kept in log records
BODY_SNAPSHOT_SIZE = 1024


def drain_response(response: httpx.Response, *, method: str, url: str) -> bytes:
    """Read the whole body of a streamed response and release it.

    Draining the body lets the transport reuse the connection.

    Args:
        response: The streamed response.
        method: The HTTP method, used in error messages.
        url: The URL that was requested, used in error messages.

    Returns:
        The body of the response.

    Raises:
        TransportError: If reading the body fails.
    """
    try:
        return response.read()
    except httpx.HTTPError as exc:
        log_structured(
            logger,
            logging.WARNING,
            f"{method} request to {url} failed while reading the response body",
            url=url,
            method=method,
            status_code=response.status_code,
            error=str(exc),
        )
        raise TransportError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed while reading the response body: {exc}",
            cause=exc,
        ) from exc
    finally:
        response.close()


def decode_error_body(body: bytes) -> tuple[str, Any]:
    """Decode a JSON error document.

    Args:
        body: The raw body of the error response.

    Returns:
        The tuple ``(error_summary, error)``. A missing ``error_summary``
        decodes as an empty string and a missing ``error`` as ``None``.

    Raises:
        ValueError: If the body is not a JSON object or if
            ``error_summary`` is not a string.

    Example:
        ```pycon
        >>> from dbxcore.utils.response import decode_error_body
        >>> decode_error_body(b'{"error_summary": "path/not_found/", "error": {".tag": "path"}}')
        ('path/not_found/', {'.tag': 'path'})

        ```
    """
    document = json.loads(body)
    if not isinstance(document, dict):
        msg = f"expected a JSON object, got {type(document).__name__}"
        raise ValueError(msg)
    summary = document.get("error_summary", "")
    if not isinstance(summary, str):
        msg = f"error_summary must be a string, got {type(summary).__name__}"
        raise ValueError(msg)
    return summary, document.get("error")


def classify_response(response: httpx.Response, *, method: str, url: str) -> Result:
    """Turn a terminal response into a ``Result`` or raise a typed
    error.

    A response with a status code < 400 is a success and the ownership
    of its body moves to the caller. Otherwise the body is consumed and
    closed here, and an ``ApiError`` is raised. The summary of the error
    is the verbatim body for ``text/plain`` responses, and the
    ``error_summary`` field of the JSON error document otherwise.

    Every terminal response that is not a 2xx is logged once. 409
    responses carry typed application errors and are logged at DEBUG.

    Args:
        response: The streamed terminal response.
        method: The HTTP method of the request.
        url: The URL of the request.

    Returns:
        The successful result.

    Raises:
        ApiError: If the status code is >= 400.
        DecodeError: If a non ``text/plain`` error body is not a valid
            JSON error document.
        TransportError: If reading the error body fails.
    """
    status_code = response.status_code
    if status_code < 400:
        if not 200 <= status_code < 300:
            _log_terminal(method=method, url=url, status_code=status_code, summary="")
        return Result(response)

    body = drain_response(response, method=method, url=url)
    content_type = response.headers.get("Content-Type", "")

    if "text/plain" in content_type:
        summary = body.decode(response.encoding or "utf-8", errors="replace")
        error = None
    else:
        try:
            summary, error = decode_error_body(body)
        except ValueError as exc:
            snapshot = body[:BODY_SNAPSHOT_SIZE].decode("utf-8", errors="replace")
            _log_terminal(method=method, url=url, status_code=status_code, summary=snapshot)
            raise DecodeError(
                method=method,
                url=url,
                message=(
                    f"{method} request to {url} failed with status {status_code} "
                    f"and an undecodable error body: {exc}"
                ),
                status_code=status_code,
                body=body,
                cause=exc,
            ) from exc

    _log_terminal(method=method, url=url, status_code=status_code, summary=summary)
    raise ApiError(
        status=httpx.codes.get_reason_phrase(status_code),
        status_code=status_code,
        summary=summary,
        error=error,
        method=method,
        url=url,
    )


def _log_terminal(*, method: str, url: str, status_code: int, summary: str) -> None:
    level = logging.DEBUG if status_code == APPLICATION_ERROR_STATUS else logging.WARNING
    log_structured(
        logger,
        level,
        f"{method} request to {url} ended with status {status_code}",
        url=url,
        method=method,
        status_code=status_code,
        summary=summary,
    )
