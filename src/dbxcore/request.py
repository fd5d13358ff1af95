r"""Contain the request executor with automatic retry logic."""

from __future__ import annotations

__all__ = ["execute"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from dbxcore.callbacks import invoke_on_failure, invoke_on_retry
from dbxcore.core.builder import build_request, payload_offset, rewind_payload
from dbxcore.core.retry_logic import RetryState
from dbxcore.exceptions import ApiError, Canceled, TransportError
from dbxcore.utils import check_canceled, classify_response, drain_response, interruptible_sleep
from dbxcore.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from dbxcore.call import Call
    from dbxcore.core.config import Config
    from dbxcore.result import Result

logger: logging.Logger = logging.getLogger(__name__)


def execute(call: Call, config: Config) -> Result:
    """Execute a call with automatic retry logic.

    The request is built, dispatched with ``config.http_client`` and
    retried while the server answers with a retryable status:

    - 429: wait the integer ``Retry-After`` header value, 60s when the
      header is absent or unparseable.
    - >= 500: exponential backoff starting at 0.5s and growing by x1.5.
      Once the next wait would reach 300s, the last response is
      terminal.

    Before each sleep the previous response body is drained and the
    response is closed so that the connection can be reused. Transport
    failures are never retried.

    The cancellation signal of the call is checked before each dispatch
    and while sleeping. The executor holds no lock: concurrent calls are
    dispatched independently.

    Args:
        call: The call to execute.
        config: The configuration (credential and HTTP client).

    Returns:
        The successful result. The caller owns its body and must close
        it.

    Raises:
        EncodeError: If the input is not JSON serializable.
        BuildError: If the request cannot be built.
        Canceled: If the call is canceled or its deadline elapses.
        TransportError: If the round-trip fails or if an error response
            body cannot be decoded (``DecodeError``).
        ApiError: If the terminal response has a status code >= 400.

    Example:
        ```pycon
        >>> from dbxcore import Call, CallKind, Config, execute
        >>> config = Config(access_token="sl.abc")
        >>> call = Call(CallKind.RPC, "/users/get_current_account")
        >>> with execute(call, config) as result:  # doctest: +SKIP
        ...     account = result.json()
        ...

        ```
    """
    start_time = time.monotonic()
    deadline = start_time + call.max_total_time if call.max_total_time is not None else None

    # Encoding and URL errors surface here, before any network traffic
    request = build_request(call, config.access_token)
    method = request.method
    url = str(request.url)

    offset = payload_offset(call.payload)
    state = RetryState(config)
    dispatched = 0

    try:
        while True:
            check_canceled(call.cancel_event, deadline)
            if dispatched > 0:
                rewind_payload(call.payload, offset)
                request = build_request(call, config.access_token)

            dispatched += 1
            response = _send(config.http_client, request, method=method, url=url)

            wait = state.next_wait(response)
            if wait is None:
                break
            if offset is None:
                logger.debug(
                    f"{method} request to {url} got status {response.status_code} but its "
                    "payload cannot be sent twice, not retrying"
                )
                break

            logger.debug(
                f"{method} request to {url} failed with status {response.status_code} "
                f"(attempt {dispatched}), retrying in {wait:.2f}s"
            )
            drain_response(response, method=method, url=url)
            invoke_on_retry(
                config.on_retry,
                url=url,
                method=method,
                attempt=dispatched,
                wait_time=wait,
                status_code=response.status_code,
            )
            interruptible_sleep(wait, cancel_event=call.cancel_event, deadline=deadline)

        if dispatched > 1 and response.status_code < 400:
            logger.debug(f"{method} request to {url} succeeded on attempt {dispatched}")
        return classify_response(response, method=method, url=url)
    except (ApiError, TransportError, Canceled) as exc:
        invoke_on_failure(
            config.on_failure,
            url=url,
            method=method,
            attempt=dispatched,
            error=exc,
            status_code=getattr(exc, "status_code", None),
            start_time=start_time,
        )
        raise


def _send(client: httpx.Client, request: httpx.Request, *, method: str, url: str) -> httpx.Response:
    try:
        return client.send(request, stream=True)
    except httpx.HTTPError as exc:
        log_structured(
            logger,
            logging.WARNING,
            f"{method} request to {url} failed: {exc}",
            url=url,
            method=method,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise TransportError(
            method=method,
            url=url,
            message=f"{method} request to {url} failed: {exc}",
            cause=exc,
        ) from exc
