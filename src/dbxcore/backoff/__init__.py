r"""Backoff strategies for the 5xx retry policy."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from dbxcore.backoff.base import BaseBackoffStrategy
from dbxcore.backoff.exponential import ExponentialBackoff
