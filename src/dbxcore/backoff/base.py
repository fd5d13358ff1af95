r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    request that failed with a server error (status >= 500).
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given retry attempt.

        Args:
            attempt: The number of server errors already waited for
                during this call (0-indexed). For example, attempt=0 is
                the wait after the first server error.

        Returns:
            The calculated delay in seconds before the next attempt.
        """
