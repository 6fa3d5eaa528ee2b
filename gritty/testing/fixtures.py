"""
Pytest fixtures for gritty testing.

Provides common fixtures for testing code built on gritty remotes and configs.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import pytest

from gritty.config import Config, GitRemoteConfig
from gritty.secrets import AuthConfig, PlaintextSecrets
from gritty.testing.mock import MockRemote
from gritty.types.remote import CloneProtocol, Provider, RemoteConfig, TokenAuth
from gritty.types.repos import Commit, Repository


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_commit(
    sha: str = "0123456789abcdef0123456789abcdef01234567",
    message: str = "Initial commit",
    **kwargs: Any,
) -> Commit:
    """
    Create a Commit with customizable fields.

    Args:
        sha: Commit hash
        message: Commit message
        **kwargs: Additional fields to override (author, date)

    Returns:
        Commit object
    """
    defaults = {
        "author": "test-user",
        "date": datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc),
    }
    defaults.update(kwargs)
    return Commit(sha=sha, message=message, **defaults)


def create_mock_repository(
    name: str = "test-repo",
    owner: str = "test-user",
    **kwargs: Any,
) -> Repository:
    """
    Create a Repository with customizable fields.

    Args:
        name: Repository name
        owner: Owner login, used to build the clone URLs
        **kwargs: Additional fields to override

    Returns:
        Repository object
    """
    defaults: dict[str, Any] = {
        "description": None,
        "private": False,
        "fork": False,
        "default_branch": "main",
        "ssh_url": f"git@git.example.com:{owner}/{name}.git",
        "clone_url": f"https://git.example.com/{owner}/{name}.git",
        "last_commits": [create_mock_commit()],
    }
    defaults.update(kwargs)
    return Repository(name=name, **defaults)


# ============================================================================
# Mock Remote Fixtures
# ============================================================================


@pytest.fixture
def mock_remote() -> Generator[MockRemote, None, None]:
    """
    Provide an empty MockRemote for testing.

    Example:
        ```python
        def test_my_feature(mock_remote):
            mock_remote.configure_check_auth(response=False)
            asyncio.run(my_function(mock_remote))
            assert mock_remote.was_called("check_auth")
        ```
    """
    remote = MockRemote()
    yield remote
    remote.reset()


@pytest.fixture
def remote_config() -> RemoteConfig:
    """Provide a token-authenticated HTTPS RemoteConfig."""
    return RemoteConfig(
        username="test-user",
        clone_protocol=CloneProtocol.HTTPS,
        url="https://git.example.com",
        auth=TokenAuth("test-token"),
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_commit() -> Commit:
    """Provide a sample Commit object."""
    return create_mock_commit(message="Add feature\n\nLonger description of the feature.")


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository object."""
    return create_mock_repository(
        name="sample-repo",
        description="A sample repository for testing",
    )


@pytest.fixture
def plaintext_config(tmp_path: Path) -> Config:
    """
    Provide a saved config with one GitHub remote ``origin`` and an inline token.

    Example:
        ```python
        def test_loading(plaintext_config):
            config = Config.load_from_file(plaintext_config.path)
            assert config.get_remote_config("origin").auth == TokenAuth("test-token")
        ```
    """
    config = Config(
        remotes={
            "origin": GitRemoteConfig(
                provider=Provider.GITHUB,
                clone_protocol=CloneProtocol.HTTPS,
                url="https://github.com",
                username="test-user",
            )
        },
        secrets=PlaintextSecrets({"origin": AuthConfig(token="test-token")}),
        path=tmp_path / "config.toml",
    )
    config.save()
    return config
