from __future__ import annotations

import threading
import time
from unittest.mock import Mock, call, patch

import pytest

from dbxcore import Canceled
from dbxcore.utils import check_canceled, interruptible_sleep

####################################
#     Tests for check_canceled     #
####################################


def test_check_canceled_no_signal() -> None:
    check_canceled()


def test_check_canceled_event_not_set() -> None:
    check_canceled(threading.Event(), deadline=time.monotonic() + 60)


def test_check_canceled_event_set() -> None:
    event = threading.Event()
    event.set()
    with pytest.raises(Canceled, match=r"call was canceled"):
        check_canceled(event)


def test_check_canceled_deadline_elapsed() -> None:
    with pytest.raises(Canceled, match=r"call deadline exceeded"):
        check_canceled(deadline=time.monotonic() - 1.0)


#########################################
#     Tests for interruptible_sleep     #
#########################################


def test_interruptible_sleep_without_event(mock_sleep: Mock) -> None:
    interruptible_sleep(1.5)
    assert mock_sleep.call_args_list == [call(1.5)]


def test_interruptible_sleep_with_event_waits_on_event() -> None:
    event = Mock(spec=threading.Event)
    event.is_set.return_value = False
    event.wait.return_value = False

    interruptible_sleep(2.0, cancel_event=event)

    event.wait.assert_called_once_with(2.0)


def test_interruptible_sleep_already_canceled(mock_sleep: Mock) -> None:
    event = threading.Event()
    event.set()
    with pytest.raises(Canceled):
        interruptible_sleep(1.0, cancel_event=event)
    mock_sleep.assert_not_called()


def test_interruptible_sleep_interrupted() -> None:
    event = threading.Event()
    timer = threading.Timer(0.05, event.set)
    start = time.monotonic()
    timer.start()
    try:
        with pytest.raises(Canceled, match=r"call was canceled"):
            interruptible_sleep(60.0, cancel_event=event)
    finally:
        timer.cancel()
    assert time.monotonic() - start < 5.0


def test_interruptible_sleep_deadline_inside_sleep(mock_sleep: Mock) -> None:
    with patch("dbxcore.utils.sleep.time.monotonic", return_value=100.0):
        with pytest.raises(Canceled, match=r"call deadline exceeded"):
            interruptible_sleep(10.0, deadline=102.0)
    assert mock_sleep.call_args_list == [call(2.0)]


def test_interruptible_sleep_deadline_after_sleep(mock_sleep: Mock) -> None:
    with patch("dbxcore.utils.sleep.time.monotonic", return_value=100.0):
        interruptible_sleep(1.0, deadline=102.0)
    assert mock_sleep.call_args_list == [call(1.0)]
