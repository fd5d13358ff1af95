r"""Shared test helpers: a scripted fake API server built on
``httpx.MockTransport``.

The server answers each request with the next scripted response and
records both the requests and the responses so that tests can check
what was dispatched and whether every response body was released.
"""

from __future__ import annotations

__all__ = [
    "TOKEN",
    "FailingByteStream",
    "MockServer",
    "StreamedBody",
    "error_response",
    "json_response",
    "text_response",
]

import json
from typing import TYPE_CHECKING, Any, Union

import httpx

from dbxcore import Config

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

TOKEN = "sl.test-token"

Reply = Union["Callable[[httpx.Request], httpx.Response]", Exception]


def json_response(status_code: int, document: Any, **kwargs: Any) -> Callable[[httpx.Request], httpx.Response]:
    """Script a response with a JSON body."""

    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=document, request=request, **kwargs)

    return reply


def text_response(status_code: int, text: str, **kwargs: Any) -> Callable[[httpx.Request], httpx.Response]:
    """Script a response with a ``text/plain`` body."""

    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text, request=request, **kwargs)

    return reply


def error_response(
    status_code: int, summary: str, error: Any = None, **kwargs: Any
) -> Callable[[httpx.Request], httpx.Response]:
    """Script a JSON error document response."""
    return json_response(status_code, {"error_summary": summary, "error": error}, **kwargs)


class FailingByteStream(httpx.SyncByteStream):
    """Response body that fails after yielding a partial chunk."""

    def __iter__(self) -> Iterator[bytes]:
        yield b"partial"
        msg = "connection reset while reading body"
        raise httpx.ReadError(msg)


class StreamedBody(httpx.SyncByteStream):
    """Response body that is only read on demand, like the body of a
    response returned by ``httpx.Client.send(..., stream=True)``."""

    def __init__(self, content: bytes) -> None:
        self._content = content

    def __iter__(self) -> Iterator[bytes]:
        yield self._content


class MockServer:
    """Scripted fake API server.

    Each added reply is used once, in order. With ``repeat_last=True``
    the last reply answers every further request.
    """

    def __init__(self) -> None:
        self.replies: list[Reply] = []
        self.repeat_last = False
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def add(self, *replies: Reply, repeat_last: bool = False) -> MockServer:
        self.replies.extend(replies)
        self.repeat_last = repeat_last
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = len(self.requests) - 1
        if index >= len(self.replies):
            if not self.repeat_last or not self.replies:
                msg = f"unexpected request #{index + 1} to {request.url}"
                raise AssertionError(msg)
            index = len(self.replies) - 1
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        response = reply(request)
        self.responses.append(response)
        return response

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def config(self, **kwargs: Any) -> Config:
        return Config(access_token=TOKEN, http_client=self.http_client(), **kwargs)

    def request_json(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)
