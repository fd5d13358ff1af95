from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from dbxcore.pool import shutdown_worker_pool
from tests.helpers import MockServer

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def server() -> MockServer:
    """Create an empty fake API server.

    Scripted responses are added with ``server.add(...)``.
    """
    return MockServer()


@pytest.fixture
def clean_worker_pool() -> Generator[None, None, None]:
    """Stop the process-wide worker pool after the test."""
    yield
    shutdown_worker_pool(timeout=5.0)
