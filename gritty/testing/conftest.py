"""
Pytest plugin for gritty testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gritty.testing.conftest"]

Or import the fixtures directly:

    from gritty.testing.fixtures import mock_remote, sample_repository
"""

# Re-export all fixtures for pytest auto-discovery
from gritty.testing.fixtures import (
    mock_remote,
    plaintext_config,
    remote_config,
    sample_commit,
    sample_repository,
)

__all__ = [
    "mock_remote",
    "remote_config",
    "sample_commit",
    "sample_repository",
    "plaintext_config",
]
