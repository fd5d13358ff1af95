r"""Define the result of a successful call."""

from __future__ import annotations

__all__ = ["Result"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType
    from typing import Self

    import httpx


class Result:
    r"""Successful outcome of a call.

    The result owns the streamed response body: the caller must close
    it, either explicitly with ``close()`` or by using the result as a
    context manager.

    Args:
        response: The streamed ``httpx.Response`` with a status < 400.

    Example:
        ```pycon
        >>> import httpx
        >>> from dbxcore.result import Result
        >>> with Result(httpx.Response(200, content=b'{"account_id": "abc"}')) as result:
        ...     result.json()
        ...
        {'account_id': 'abc'}

        ```
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(status_code={self.status_code}, "
            f"content_length={self.content_length})"
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def response(self) -> httpx.Response:
        r"""The underlying streamed response."""
        return self._response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def content_length(self) -> int:
        r"""The declared length of the body, or -1 when it is unknown."""
        value = self._response.headers.get("Content-Length")
        if value is None:
            return -1
        try:
            length = int(value)
        except ValueError:
            return -1
        return length if length >= 0 else -1

    @property
    def is_closed(self) -> bool:
        return self._response.is_closed

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]:
        r"""Stream the body.

        Args:
            chunk_size: Optional size of the yielded chunks.

        Returns:
            An iterator over the body chunks.
        """
        return self._response.iter_bytes(chunk_size)

    def read(self) -> bytes:
        r"""Read and return the whole body."""
        return self._response.read()

    def json(self, **kwargs: Any) -> Any:
        r"""Read the whole body and decode it as JSON.

        Args:
            **kwargs: Keyword arguments passed to ``json.loads``.

        Returns:
            The decoded document.
        """
        self._response.read()
        return self._response.json(**kwargs)

    def close(self) -> None:
        r"""Release the connection of the response."""
        self._response.close()
