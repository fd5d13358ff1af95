from __future__ import annotations

import httpx
import pytest

from dbxcore import Result
from tests.helpers import StreamedBody


def make_result(content: bytes = b"", headers: dict[str, str] | None = None) -> Result:
    return Result(httpx.Response(200, headers=headers, stream=StreamedBody(content)))


def test_result_properties() -> None:
    result = make_result(b"{}", headers={"Content-Type": "application/json"})
    assert result.status_code == 200
    assert result.headers["Content-Type"] == "application/json"
    assert not result.is_closed
    assert repr(result) == "Result(status_code=200, content_length=-1)"


@pytest.mark.parametrize(
    ("value", "length"), [("1048576", 1048576), ("0", 0), ("abc", -1), ("-4", -1)]
)
def test_result_content_length(value: str, length: int) -> None:
    assert make_result(headers={"Content-Length": value}).content_length == length


def test_result_content_length_missing() -> None:
    assert make_result().content_length == -1


def test_result_read() -> None:
    result = make_result(b"hello")
    assert result.read() == b"hello"
    assert result.is_closed


def test_result_json() -> None:
    assert make_result(b'{"account_id": "abc"}').json() == {"account_id": "abc"}


def test_result_iter_bytes() -> None:
    result = make_result(b"abcdef")
    assert list(result.iter_bytes(chunk_size=4)) == [b"abcd", b"ef"]


def test_result_context_manager_closes() -> None:
    with make_result(b"data") as result:
        assert not result.is_closed
    assert result.is_closed


def test_result_close_without_reading() -> None:
    result = make_result(b"data")
    result.close()
    assert result.is_closed
    assert result.response.is_closed
