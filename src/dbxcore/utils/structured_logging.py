r"""JSON log records for the executor.

The executor attaches the ``url``, ``method``, ``status_code`` and
``summary`` of every non-2xx terminal response to its log record as
``extra`` fields. ``dbxcore`` never installs handlers; an application
that wants one JSON object per line plugs ``StructuredFormatter`` into
its own handler:

```python
import logging
from dbxcore.utils.structured_logging import StructuredFormatter, correlation_scope

handler = logging.StreamHandler()
handler.setFormatter(StructuredFormatter())
logging.getLogger("dbxcore").addHandler(handler)

with correlation_scope("sync-job-42"):
    client.rpc("/users/get_current_account")
```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_scope",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextlib
import contextvars
import json
import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "dbxcore.correlation_id", default=None
)

# Output key -> LogRecord attribute
_BASE_FIELDS = {
    "level": "levelname",
    "logger": "name",
    "module": "module",
    "function": "funcName",
    "line": "lineno",
    "thread": "threadName",
    "process": "process",
}

# Every attribute a bare LogRecord carries, the rest came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    r"""Return the correlation ID of the current context, if any."""
    return _CORRELATION_ID.get()


def set_correlation_id(correlation_id: str) -> None:
    """Tag the records of the current context with a correlation ID.

    The value lives in a context variable. Jobs of the worker pool run
    in a copy of the submitting context, so they see it too.

    Args:
        correlation_id: The ID shared by related calls, e.g. a job ID.
    """
    _CORRELATION_ID.set(correlation_id)


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(None)


@contextlib.contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Set a correlation ID for the duration of a ``with`` block.

    The previous value is restored on exit, so scopes can be nested.

    Args:
        correlation_id: The ID shared by the calls of the block.

    Example:
        ```pycon
        >>> from dbxcore.utils.structured_logging import correlation_scope, get_correlation_id
        >>> with correlation_scope("sync-job-42"):
        ...     get_correlation_id()
        ...
        'sync-job-42'
        >>> get_correlation_id() is None
        True

        ```
    """
    token = _CORRELATION_ID.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _CORRELATION_ID.reset(token)


class StructuredFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    The object holds ``timestamp`` (ISO 8601, UTC, milliseconds),
    ``message``, the fields of ``_BASE_FIELDS``, ``correlation_id`` when
    one is set, ``exception`` when the record carries one, and every
    ``extra`` field. Values that JSON cannot encode are written with
    ``str()``.

    Example:
        ```pycon
        >>> import logging
        >>> from dbxcore.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord(
        ...     {"msg": "POST ended with status 409", "levelname": "DEBUG", "status_code": 409}
        ... )
        >>> '"status_code": 409' in StructuredFormatter().format(record)
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "message": record.getMessage(),
        }
        entry.update({key: getattr(record, attr) for key, attr in _BASE_FIELDS.items()})

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        )
        return json.dumps(entry, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{stamp}.{int(record.msecs):03d}Z"


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Fields set to ``None`` are left out of the record.

    Args:
        logger: The logger to use.
        level: The log level, e.g. ``logging.WARNING``.
        message: The log message.
        **extra: The structured fields. Names must not clash with
            ``logging.LogRecord`` attributes.

    Example:
        ```pycon
        >>> import logging
        >>> from dbxcore.utils.structured_logging import log_structured
        >>> log_structured(
        ...     logging.getLogger("dbxcore.example"),
        ...     logging.WARNING,
        ...     "POST request ended with status 400",
        ...     url="https://api.dropboxapi.com/2/users/get_current_account",
        ...     method="POST",
        ...     status_code=400,
        ... )

        ```
    """
    if not logger.isEnabledFor(level):
        return
    fields = {key: value for key, value in extra.items() if value is not None}
    logger.log(level, message, extra=fields)
