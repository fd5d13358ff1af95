r"""Unit tests for the retry decisions."""

from __future__ import annotations

import httpx
import pytest

from dbxcore.backoff import ExponentialBackoff
from dbxcore.core import Config, RetryState, is_retryable_status


@pytest.fixture
def config() -> Config:
    return Config(
        access_token="sl.abc",
        http_client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200))),
    )


def rate_limited(retry_after: str | None = None) -> httpx.Response:
    headers = {} if retry_after is None else {"Retry-After": retry_after}
    return httpx.Response(429, headers=headers)


#########################################
#     Tests for is_retryable_status     #
#########################################


@pytest.mark.parametrize("status_code", [429, 500, 502, 503, 504, 599])
def test_is_retryable_status_true(status_code: int) -> None:
    assert is_retryable_status(status_code)


@pytest.mark.parametrize("status_code", [200, 204, 302, 400, 401, 404, 409, 428, 499])
def test_is_retryable_status_false(status_code: int) -> None:
    assert not is_retryable_status(status_code)


################################
#     Tests for RetryState     #
################################


@pytest.mark.parametrize("status_code", [200, 400, 409])
def test_retry_state_terminal_status(config: Config, status_code: int) -> None:
    state = RetryState(config)
    assert state.next_wait(httpx.Response(status_code)) is None
    assert state.attempts == 1


def test_retry_state_server_error_backoff(config: Config) -> None:
    state = RetryState(config)
    assert [state.next_wait(httpx.Response(503)) for _ in range(4)] == [
        0.5,
        0.75,
        1.125,
        1.6875,
    ]
    assert state.server_errors == 4


def test_retry_state_server_error_cap(config: Config) -> None:
    state = RetryState(config)
    waits = []
    while (wait := state.next_wait(httpx.Response(500))) is not None:
        waits.append(wait)
    assert len(waits) == 16
    assert max(waits) < 300
    assert state.backoff >= 300


def test_retry_state_custom_strategy(config: Config) -> None:
    state = RetryState(
        config.merge(backoff_strategy=ExponentialBackoff(base_delay=1.0, multiplier=2.0))
    )
    assert [state.next_wait(httpx.Response(500)) for _ in range(3)] == [1.0, 2.0, 4.0]


def test_retry_state_capped_strategy_terminates(config: Config) -> None:
    state = RetryState(
        config.merge(
            backoff_strategy=ExponentialBackoff(base_delay=1.0, multiplier=2.0, max_delay=100.0)
        )
    )
    waits = []
    while (wait := state.next_wait(httpx.Response(500))) is not None:
        waits.append(wait)
    assert sum(waits) <= 750


@pytest.mark.parametrize(("header", "wait"), [("1", 1.0), ("0", 0.0), (" 20 ", 20.0)])
def test_retry_state_rate_limit_retry_after(config: Config, header: str, wait: float) -> None:
    assert RetryState(config).next_wait(rate_limited(header)) == wait


@pytest.mark.parametrize("header", [None, "", "abc", "2.5", "-1"])
def test_retry_state_rate_limit_default(config: Config, header: str | None) -> None:
    assert RetryState(config).next_wait(rate_limited(header)) == 60.0


def test_retry_state_rate_limit_is_always_retried(config: Config) -> None:
    state = RetryState(config)
    assert [state.next_wait(rate_limited()) for _ in range(10)] == [60.0] * 10
    assert state.rate_limit_wait == 600.0


@pytest.mark.parametrize(("header", "wait"), [("300", 300.0), ("3600", 3600.0)])
def test_retry_state_rate_limit_large_retry_after(config: Config, header: str, wait: float) -> None:
    assert RetryState(config).next_wait(rate_limited(header)) == wait


def test_retry_state_rate_limit_does_not_advance_backoff(config: Config) -> None:
    state = RetryState(config)
    assert state.next_wait(rate_limited("10")) == 10.0
    assert state.next_wait(httpx.Response(503)) == 0.5
    assert state.next_wait(rate_limited("10")) == 10.0
    assert state.next_wait(httpx.Response(503)) == 0.75
    assert state.attempts == 4
