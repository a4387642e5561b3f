"""
Pytest fixtures for auth tests.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def sample_credentials() -> dict[str, str]:
    """Sample credentials for testing."""
    return {
        "ikey": "DIWJ8X6AEYOR5OMC6TQ1",
        "skey": "Zh5eGmUq9zpfQnyUIu5OL9iWoMMv5ZNmk3zLJ4Ep",
    }


@pytest.fixture
def fixed_date() -> str:
    """Fixed RFC 2822 date for reproducible signatures."""
    return "Tue, 14 Nov 2023 22:13:20 +0000"
