r"""Utility functions for the request executor."""

from __future__ import annotations

__all__ = [
    "check_canceled",
    "classify_response",
    "decode_error_body",
    "drain_response",
    "interruptible_sleep",
    "parse_retry_after",
]

from dbxcore.utils.response import classify_response, decode_error_body, drain_response
from dbxcore.utils.retry_after import parse_retry_after
from dbxcore.utils.sleep import check_canceled, interruptible_sleep
