r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from dbxcore.backoff.base import BaseBackoffStrategy
from dbxcore.core.config import BACKOFF_MULTIPLIER, INITIAL_BACKOFF


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (multiplier ** attempt), with
    optional max_delay cap.

    With the default values the delays are 0.5s, 0.75s, 1.125s, ...

    Args:
        base_delay: The first delay in seconds (default: 0.5).
        multiplier: The growth factor between two consecutive delays
            (default: 1.5). Must be >= 1.
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value.

    Example:
        ```pycon
        >>> from dbxcore.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(1)
        0.75
        >>> backoff.calculate(2)
        1.125
        >>> backoff = ExponentialBackoff(base_delay=1.0, multiplier=2.0, max_delay=5.0)
        >>> backoff.calculate(10)
        5.0

        ```
    """

    def __init__(
        self,
        base_delay: float = INITIAL_BACKOFF,
        multiplier: float = BACKOFF_MULTIPLIER,
        max_delay: float | None = None,
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The current attempt number (0-indexed).

        Returns:
            The calculated delay: base_delay * (multiplier ** attempt),
            capped at max_delay if set.
        """
        delay = self.base_delay * (self.multiplier**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
