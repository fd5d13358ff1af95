from __future__ import annotations

import pytest

from dbxcore import (
    ApiError,
    BuildError,
    Canceled,
    DbxError,
    DecodeError,
    EncodeError,
    TransportError,
)

URL = "https://api.dropboxapi.com/2/files/get_metadata"


@pytest.mark.parametrize(
    "error_type", [ApiError, BuildError, Canceled, DecodeError, EncodeError, TransportError]
)
def test_errors_share_base_class(error_type: type[Exception]) -> None:
    assert issubclass(error_type, DbxError)


def test_decode_error_is_transport_error() -> None:
    assert issubclass(DecodeError, TransportError)
    assert not issubclass(ApiError, TransportError)


###################################
#     Tests for TransportError    #
###################################


def test_transport_error() -> None:
    cause = OSError("connection reset")
    error = TransportError(method="POST", url=URL, message="POST request failed", cause=cause)
    assert str(error) == "POST request failed"
    assert error.method == "POST"
    assert error.url == URL
    assert error.cause is cause


def test_transport_error_without_cause() -> None:
    assert TransportError(method="POST", url=URL, message="boom").cause is None


#################################
#     Tests for DecodeError     #
#################################


def test_decode_error() -> None:
    error = DecodeError(
        method="POST", url=URL, message="undecodable body", status_code=502, body=b"<html>"
    )
    assert str(error) == "undecodable body"
    assert error.status_code == 502
    assert error.body == b"<html>"
    assert error.cause is None


##############################
#     Tests for ApiError     #
##############################


def test_api_error() -> None:
    error = ApiError(
        status="Conflict",
        status_code=409,
        summary="path/not_found/..",
        error={".tag": "path", "path": {".tag": "not_found"}},
        method="POST",
        url=URL,
    )
    assert str(error) == "409 Conflict: path/not_found/.."
    assert error.status == "Conflict"
    assert error.status_code == 409
    assert error.summary == "path/not_found/.."
    assert error.error == {".tag": "path", "path": {".tag": "not_found"}}
    assert error.method == "POST"
    assert error.url == URL


def test_api_error_defaults() -> None:
    error = ApiError(status="Bad Request", status_code=400, summary="bad request")
    assert error.error is None
    assert error.method is None
    assert error.url is None
