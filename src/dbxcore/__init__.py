r"""dbxcore - HTTP request executor for the Dropbox API v2.

This package serializes calls to the RPC and content endpoints of the
Dropbox API into HTTPS requests, dispatches them with httpx, retries
transient failures, and turns the terminal response into a result or a
typed error.

Key Features:
    - RPC endpoints (JSON body) and content endpoints (JSON argument in
      the ``Dropbox-API-Arg`` header, binary body)
    - Retry of 429 responses honoring ``Retry-After`` (60s by default)
    - Exponential backoff of 5xx responses (0.5s, x1.5, capped at 300s)
    - Typed errors: ``ApiError`` carrying the ``error_summary`` of the
      server, ``TransportError``, ``DecodeError``, ``EncodeError``,
      ``BuildError`` and ``Canceled``
    - Cancellation through a ``threading.Event`` or an overall deadline
    - Optional bounded worker pool for outbound dispatches
    - Structured logging of terminal error responses

Example:
    ```pycon
    >>> from dbxcore import Client, Config
    >>> with Client(Config(access_token="sl.abc")) as client:  # doctest: +SKIP
    ...     with client.rpc("/users/get_current_account") as result:
    ...         account = result.json()
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "BuildError",
    "Call",
    "CallKind",
    "Canceled",
    "Client",
    "Config",
    "DbxError",
    "DecodeError",
    "EncodeError",
    "Result",
    "TransportError",
    "__version__",
    "execute",
]

from importlib.metadata import PackageNotFoundError, version

from dbxcore.call import Call, CallKind
from dbxcore.client import Client
from dbxcore.core.config import Config
from dbxcore.exceptions import (
    ApiError,
    BuildError,
    Canceled,
    DbxError,
    DecodeError,
    EncodeError,
    TransportError,
)
from dbxcore.request import execute
from dbxcore.result import Result

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
