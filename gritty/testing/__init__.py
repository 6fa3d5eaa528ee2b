"""Gritty testing utilities.

Provides an in-memory remote and fixtures for testing applications built on gritty.
"""

from gritty.testing.fixtures import create_mock_commit, create_mock_repository
from gritty.testing.mock import MockCall, MockRemote, MockResponse

__all__ = [
    # Mock remote
    "MockRemote",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_repository",
    "create_mock_commit",
]
