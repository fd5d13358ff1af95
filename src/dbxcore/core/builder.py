r"""Build the HTTP request of a call.

This module converts a ``Call`` into a ready-to-dispatch
``httpx.Request``: host selection by call kind, required headers and
body encoding. Nothing here touches the network.
"""

from __future__ import annotations

__all__ = [
    "CHUNK_SIZE",
    "build_request",
    "build_url",
    "encode_api_arg",
    "encode_json",
    "payload_offset",
    "rewind_payload",
]

import json
from typing import TYPE_CHECKING, Any

import httpx

from dbxcore.call import CallKind
from dbxcore.core.config import API_HOST, API_VERSION_PREFIX, CONTENT_HOST
from dbxcore.exceptions import BuildError, EncodeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dbxcore.call import Call, Payload

# Size of the chunks read from file-like payloads
CHUNK_SIZE = 64 * 1024

_HOSTS = {CallKind.RPC: API_HOST, CallKind.CONTENT: CONTENT_HOST}


def encode_json(value: Any) -> bytes:
    """Encode a call input as a JSON document.

    Args:
        value: The value to encode. ``None`` encodes as ``null``.

    Returns:
        The UTF-8 encoded JSON document.

    Raises:
        EncodeError: If the value is not JSON serializable.

    Example:
        ```pycon
        >>> from dbxcore.core.builder import encode_json
        >>> encode_json(None)
        b'null'
        >>> encode_json({"path": "/a.bin"})
        b'{"path": "/a.bin"}'

        ```
    """
    try:
        return json.dumps(value, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        msg = f"cannot encode call input as JSON: {exc}"
        raise EncodeError(msg) from exc


def encode_api_arg(value: Any) -> str:
    r"""Encode a call input for the ``Dropbox-API-Arg`` header.

    The header must be ASCII, so non-ASCII code points are written with
    the JSON ``\uXXXX`` escape.

    Args:
        value: The value to encode.

    Returns:
        The ASCII JSON document.

    Raises:
        EncodeError: If the value is not JSON serializable.

    Example:
        ```pycon
        >>> from dbxcore.core.builder import encode_api_arg
        >>> encode_api_arg({"path": "/café.txt"})
        '{"path": "/caf\\u00e9.txt"}'

        ```
    """
    try:
        return json.dumps(value, ensure_ascii=True, allow_nan=False)
    except (TypeError, ValueError) as exc:
        msg = f"cannot encode call input as JSON: {exc}"
        raise EncodeError(msg) from exc


def build_url(kind: CallKind, path: str) -> str:
    """Build the URL of an endpoint.

    Args:
        kind: The endpoint family, which selects the host.
        path: The server-relative path. Must start with ``/``.

    Returns:
        The absolute URL.

    Raises:
        BuildError: If the path is malformed.

    Example:
        ```pycon
        >>> from dbxcore.call import CallKind
        >>> from dbxcore.core.builder import build_url
        >>> build_url(CallKind.RPC, "/users/get_current_account")
        'https://api.dropboxapi.com/2/users/get_current_account'
        >>> build_url(CallKind.CONTENT, "/files/download")
        'https://content.dropboxapi.com/2/files/download'

        ```
    """
    if not isinstance(path, str) or not path.startswith("/"):
        msg = f"path must be a string starting with '/', got {path!r}"
        raise BuildError(msg)
    if any(char.isspace() for char in path) or "?" in path or "#" in path:
        msg = f"path must not contain whitespace, '?' or '#', got {path!r}"
        raise BuildError(msg)
    return f"https://{_HOSTS[kind]}{API_VERSION_PREFIX}{path}"


def build_request(call: Call, access_token: str) -> httpx.Request:
    """Build the HTTP request of a call.

    The method is always POST. RPC calls carry the JSON input as body;
    CONTENT calls carry it in the ``Dropbox-API-Arg`` header and use the
    body for the optional binary payload.

    Args:
        call: The call to build.
        access_token: The bearer token.

    Returns:
        The request, ready to be sent.

    Raises:
        EncodeError: If the input is not JSON serializable.
        BuildError: If the URL cannot be built.
    """
    url = build_url(call.kind, call.path)
    headers = {"Authorization": f"Bearer {access_token}"}

    if call.kind is CallKind.RPC:
        headers["Content-Type"] = "application/json"
        content: Any = encode_json(call.input)
    else:
        headers["Dropbox-API-Arg"] = encode_api_arg(call.input)
        content = None
        if call.payload is not None:
            headers["Content-Type"] = "application/octet-stream"
            content = _payload_content(call.payload)

    try:
        return httpx.Request("POST", url, headers=headers, content=content)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        msg = f"cannot build request for {url}: {exc}"
        raise BuildError(msg) from exc


def payload_offset(payload: Payload | None) -> int | None:
    """Return the offset to rewind a payload to before a re-dispatch.

    Args:
        payload: The payload of the call.

    Returns:
        ``0`` for no payload and bytes-like payloads, the current
        position of seekable streams, and ``None`` for one-shot payloads
        that cannot be sent twice.

    Example:
        ```pycon
        >>> import io
        >>> from dbxcore.core.builder import payload_offset
        >>> payload_offset(b"data")
        0
        >>> payload_offset(io.BytesIO(b"data"))
        0
        >>> payload_offset(iter([b"data"])) is None
        True

        ```
    """
    if payload is None or isinstance(payload, (bytes, bytearray, memoryview)):
        return 0
    seekable = getattr(payload, "seekable", None)
    if seekable is not None and seekable():
        return payload.tell()
    return None


def rewind_payload(payload: Payload | None, offset: int) -> None:
    """Move a seekable payload back to ``offset``.

    Bytes-like payloads and missing payloads need no rewinding.

    Args:
        payload: The payload of the call.
        offset: The offset returned by ``payload_offset``.
    """
    if payload is not None and hasattr(payload, "seek"):
        payload.seek(offset)


def _payload_content(payload: Payload) -> bytes | Iterator[bytes] | Any:
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    if hasattr(payload, "read"):
        return _iter_chunks(payload)
    return payload


def _iter_chunks(stream: Any) -> Iterator[bytes]:
    while chunk := stream.read(CHUNK_SIZE):
        yield chunk
