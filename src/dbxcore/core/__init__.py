r"""Core logic of the executor: configuration, validation, request
building and retry decisions."""

from __future__ import annotations

__all__ = [
    "API_HOST",
    "CONTENT_HOST",
    "DEFAULT_RETRY_AFTER",
    "DEFAULT_TIMEOUT",
    "MAX_BACKOFF",
    "Config",
    "RetryState",
    "build_request",
    "is_retryable_status",
    "validate_access_token",
    "validate_retry_params",
    "validate_timeout",
]

from dbxcore.core.builder import build_request
from dbxcore.core.config import (
    API_HOST,
    CONTENT_HOST,
    DEFAULT_RETRY_AFTER,
    DEFAULT_TIMEOUT,
    MAX_BACKOFF,
    Config,
)
from dbxcore.core.retry_logic import RetryState, is_retryable_status
from dbxcore.core.validation import (
    validate_access_token,
    validate_retry_params,
    validate_timeout,
)
