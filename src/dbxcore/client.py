r"""Client facade over the request executor.

Operation code builds a path and an input document and hands
them to ``Client.rpc`` or ``Client.content``.
"""

from __future__ import annotations

__all__ = ["Client"]

from typing import TYPE_CHECKING, Any

from dbxcore.call import Call, CallKind
from dbxcore.core.config import Config
from dbxcore.pool import get_worker_pool
from dbxcore.request import execute

if TYPE_CHECKING:
    import threading
    from types import TracebackType
    from typing import Self

    from dbxcore.call import Payload
    from dbxcore.result import Result


class Client:
    r"""Issue calls against the RPC and content endpoints.

    The client is thread-safe: the configuration is read-only and calls
    are dispatched independently. With ``use_worker_pool=True`` the
    dispatches go through the process-wide bounded worker pool. The pool
    is started by the first such client and restarted by the next call
    if it was shut down in between.

    When the client is built from an access token it owns its
    configuration and closes the underlying ``httpx.Client`` when its
    context exits. A ``Config`` passed in may be shared with other
    clients, so its ``httpx.Client`` is left open.

    Args:
        config: The configuration, or an access token to build a default
            configuration from.
        use_worker_pool: Whether to dispatch through the worker pool.

    Example:
        ```pycon
        >>> from dbxcore import Client
        >>> with Client("sl.abc") as client:  # doctest: +SKIP
        ...     with client.rpc("/users/get_current_account") as result:
        ...         account = result.json()
        ...     with client.content("/files/download", {"path": "/a.bin"}) as result:
        ...         data = result.read()
        ...

        ```
    """

    def __init__(self, config: Config | str, *, use_worker_pool: bool = False) -> None:
        self._owns_config = not isinstance(config, Config)
        self._config: Config = Config(access_token=config) if self._owns_config else config
        self._use_worker_pool = use_worker_pool
        if use_worker_pool:
            get_worker_pool()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(use_worker_pool={self._use_worker_pool})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_config:
            self.close()

    @property
    def config(self) -> Config:
        return self._config

    def close(self) -> None:
        r"""Close the underlying ``httpx.Client``."""
        self._config.http_client.close()

    def execute(self, call: Call) -> Result:
        """Execute a call and block until its terminal outcome.

        Args:
            call: The call to execute.

        Returns:
            The successful result. The caller must close it.

        Raises:
            DbxError: The typed error of the call, see ``execute``.
        """
        if self._use_worker_pool:
            return get_worker_pool().submit(execute, call, self._config).result()
        return execute(call, self._config)

    def rpc(
        self,
        path: str,
        input: Any = None,  # noqa: A002
        *,
        cancel_event: threading.Event | None = None,
        max_total_time: float | None = None,
    ) -> Result:
        """Call an RPC endpoint.

        Args:
            path: The server-relative path, e.g. ``/users/get_current_account``.
            input: The JSON-serializable input document.
            cancel_event: Optional cancellation signal.
            max_total_time: Optional overall deadline in seconds.

        Returns:
            The successful result, whose body is the JSON response.
        """
        return self.execute(
            Call(
                kind=CallKind.RPC,
                path=path,
                input=input,
                cancel_event=cancel_event,
                max_total_time=max_total_time,
            )
        )

    def content(
        self,
        path: str,
        input: Any = None,  # noqa: A002
        payload: Payload | None = None,
        *,
        cancel_event: threading.Event | None = None,
        max_total_time: float | None = None,
    ) -> Result:
        """Call a content endpoint (upload or download style).

        Args:
            path: The server-relative path, e.g. ``/files/download``.
            input: The JSON-serializable argument sent in the
                ``Dropbox-API-Arg`` header.
            payload: Optional binary body (bytes, binary file-like
                object, or iterable of bytes).
            cancel_event: Optional cancellation signal.
            max_total_time: Optional overall deadline in seconds.

        Returns:
            The successful result, whose body is the downloaded content
            for download endpoints.
        """
        return self.execute(
            Call(
                kind=CallKind.CONTENT,
                path=path,
                input=input,
                payload=payload,
                cancel_event=cancel_event,
                max_total_time=max_total_time,
            )
        )
