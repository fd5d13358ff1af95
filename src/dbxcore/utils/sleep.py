r"""Cancellation-aware sleep utilities.

The executor observes the cancellation signal of a call before each
dispatch and while it sleeps between two attempts.
"""

from __future__ import annotations

__all__ = ["check_canceled", "interruptible_sleep"]

import logging
import time
from typing import TYPE_CHECKING

from dbxcore.exceptions import Canceled

if TYPE_CHECKING:
    import threading

logger: logging.Logger = logging.getLogger(__name__)


def check_canceled(
    cancel_event: threading.Event | None = None,
    deadline: float | None = None,
) -> None:
    """Raise ``Canceled`` if the cancellation signal fired or the
    deadline elapsed.

    Args:
        cancel_event: Optional cancellation signal of the call.
        deadline: Optional absolute deadline, as a ``time.monotonic()``
            value.

    Raises:
        Canceled: If the signal is set or the deadline is in the past.

    Example:
        ```pycon
        >>> import threading
        >>> from dbxcore.utils.sleep import check_canceled
        >>> check_canceled(threading.Event())
        >>> event = threading.Event()
        >>> event.set()
        >>> check_canceled(event)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        dbxcore.exceptions.Canceled: call was canceled

        ```
    """
    if cancel_event is not None and cancel_event.is_set():
        msg = "call was canceled"
        raise Canceled(msg)
    if deadline is not None and time.monotonic() >= deadline:
        msg = "call deadline exceeded"
        raise Canceled(msg)


def interruptible_sleep(
    seconds: float,
    *,
    cancel_event: threading.Event | None = None,
    deadline: float | None = None,
) -> None:
    """Sleep for ``seconds`` unless the call is canceled first.

    Without a cancellation signal this is a plain ``time.sleep``. With a
    signal the sleep waits on the event, so that ``Canceled`` is raised
    as soon as the event is set. If the deadline falls inside the sleep,
    the function sleeps until the deadline and raises ``Canceled``.

    Args:
        seconds: The number of seconds to sleep.
        cancel_event: Optional cancellation signal of the call.
        deadline: Optional absolute deadline, as a ``time.monotonic()``
            value.

    Raises:
        Canceled: If the call is canceled before or during the sleep.
    """
    check_canceled(cancel_event, deadline)

    wait = seconds
    expires = False
    if deadline is not None:
        remaining = max(0.0, deadline - time.monotonic())
        if remaining < seconds:
            wait = remaining
            expires = True

    if cancel_event is None:
        time.sleep(wait)
    elif cancel_event.wait(wait):
        logger.debug(f"Sleep of {seconds:.2f}s interrupted by cancellation")
        msg = "call was canceled"
        raise Canceled(msg)

    if expires:
        msg = "call deadline exceeded"
        raise Canceled(msg)
