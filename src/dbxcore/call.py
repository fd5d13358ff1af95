r"""Define the call descriptor handed to the executor."""

from __future__ import annotations

__all__ = ["Call", "CallKind", "Payload"]

import enum
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable

Payload = Union[bytes, bytearray, memoryview, "IO[bytes]", "Iterable[bytes]"]


class CallKind(enum.Enum):
    r"""The two endpoint families of the API.

    ``RPC`` endpoints exchange JSON documents in the request and
    response bodies. ``CONTENT`` endpoints carry their JSON argument in
    the ``Dropbox-API-Arg`` header and a binary payload in the body.
    """

    RPC = "rpc"
    CONTENT = "content"


@dataclass(frozen=True)
class Call:
    """Describe one call to the API.

    Args:
        kind: The endpoint family.
        path: The server-relative path, e.g. ``/users/get_current_account``.
        input: A value serializable to a JSON document, or ``None``.
        payload: Optional binary body of a ``CONTENT`` call: bytes, a
            binary file-like object, or an iterable of bytes chunks.
        cancel_event: Optional cancellation signal. The executor checks
            it before each dispatch and while sleeping between attempts.
        max_total_time: Optional overall deadline in seconds, counted
            from the start of the execution. Its expiry is equivalent to
            cancellation.

    Example:
        ```pycon
        >>> from dbxcore.call import Call, CallKind
        >>> call = Call(CallKind.CONTENT, "/files/download", {"path": "/a.bin"})
        >>> call.kind
        <CallKind.CONTENT: 'content'>

        ```
    """

    kind: CallKind
    path: str
    input: Any = None
    payload: Payload | None = None
    cancel_event: threading.Event | None = None
    max_total_time: float | None = None

    def __post_init__(self) -> None:
        if self.payload is not None and self.kind is not CallKind.CONTENT:
            msg = f"only {CallKind.CONTENT.name} calls accept a payload"
            raise ValueError(msg)
        if self.max_total_time is not None and self.max_total_time <= 0:
            msg = f"max_total_time must be > 0, got {self.max_total_time}"
            raise ValueError(msg)
