"""
Tests for the remote factory, clone URLs and auth status reporting.
"""

import asyncio
from unittest.mock import MagicMock, patch

import keyring.errors
import pytest

from gritty.config import Config
from gritty.exceptions import AuthNotFoundError, RemoteNotFoundError, UnsupportedAuthError
from gritty.remotes import (
    AuthStatus,
    GiteaRemote,
    GitHubRemote,
    GitLabRemote,
    auth_status,
    create_remote,
    load_remote,
)
from gritty.secrets import KeyringSecrets, PlaintextSecrets, SecretsFileSecrets
from gritty.types import BasicAuth, CloneProtocol, Provider, RemoteConfig, TokenAuth

from fakes import FakeProvider


def gitea_config(protocol: CloneProtocol) -> RemoteConfig:
    return RemoteConfig(
        username="alice",
        clone_protocol=protocol,
        url="https://gitea.example.com",
        auth=TokenAuth("t"),
    )


class TestFactory:
    @pytest.mark.parametrize(
        "provider, adapter",
        [
            (Provider.GITHUB, GitHubRemote),
            (Provider.GITLAB, GitLabRemote),
            (Provider.GITEA, GiteaRemote),
        ],
    )
    def test_provider_selects_adapter(self, provider: Provider, adapter: type) -> None:
        remote = create_remote(gitea_config(CloneProtocol.HTTPS), provider)

        assert isinstance(remote, adapter)
        assert remote.get_config() == gitea_config(CloneProtocol.HTTPS)
        asyncio.run(remote.close())

    def test_provider_names_are_case_insensitive(self) -> None:
        assert Provider("gitlab") is Provider.GITLAB
        assert Provider("GitHub") is Provider.GITHUB

    def test_incompatible_auth_fails_fast(self) -> None:
        config = RemoteConfig("alice", CloneProtocol.SSH, "https://gitlab.com", BasicAuth("alice", "pw"))

        with pytest.raises(UnsupportedAuthError):
            create_remote(config, Provider.GITLAB)


class TestCloneUrl:
    def test_ssh(self) -> None:
        remote = create_remote(gitea_config(CloneProtocol.SSH), Provider.GITEA)
        assert remote.clone_url("alice", "myrepo") == "git@gitea.example.com:alice/myrepo.git"
        asyncio.run(remote.close())

    def test_https(self) -> None:
        remote = create_remote(gitea_config(CloneProtocol.HTTPS), Provider.GITEA)
        assert remote.clone_url("alice", "myrepo") == "https://gitea.example.com/alice/myrepo.git"
        asyncio.run(remote.close())

    def test_http_scheme_and_trailing_slash(self) -> None:
        config = RemoteConfig("bob", CloneProtocol.SSH, "http://git.local/", TokenAuth("t"))
        remote = create_remote(config, Provider.GITEA)
        assert remote.clone_url("bob", "x") == "git@git.local:bob/x.git"
        asyncio.run(remote.close())


class TestLoadRemote:
    def test_load_remote(self, plaintext_config: Config) -> None:
        remote = load_remote(plaintext_config, "origin")

        assert isinstance(remote, GitHubRemote)
        assert remote.get_config().auth == TokenAuth("test-token")
        asyncio.run(remote.close())

    def test_unknown_remote(self, plaintext_config: Config) -> None:
        with pytest.raises(RemoteNotFoundError):
            load_remote(plaintext_config, "upstream")

    def test_missing_secret(self, plaintext_config: Config) -> None:
        plaintext_config.secrets = PlaintextSecrets()

        with pytest.raises(AuthNotFoundError):
            load_remote(plaintext_config, "origin")


class TestAuthStatus:
    def test_authenticated(self, plaintext_config: Config) -> None:
        fake = FakeProvider()
        fake.add("GET", "/user", payload={"login": "test-user"})

        status = asyncio.run(auth_status(plaintext_config, "origin", transport=fake.transport))

        assert status is AuthStatus.AUTHENTICATED
        assert fake.requests[0].headers["Authorization"] == "Bearer test-token"

    def test_rejected_token(self, plaintext_config: Config) -> None:
        fake = FakeProvider()
        fake.add("GET", "/user", status=401, payload={"message": "Bad credentials"})

        status = asyncio.run(auth_status(plaintext_config, "origin", transport=fake.transport))

        assert status is AuthStatus.NOT_AUTHENTICATED

    def test_not_configured(self, plaintext_config: Config) -> None:
        plaintext_config.secrets = PlaintextSecrets()
        fake = FakeProvider()

        status = asyncio.run(auth_status(plaintext_config, "origin", transport=fake.transport))

        assert status is AuthStatus.NOT_CONFIGURED
        assert fake.requests == []

    def test_keyring_failure_is_not_configured(self, plaintext_config: Config) -> None:
        plaintext_config.secrets = KeyringSecrets(plaintext_config.path)
        failing = MagicMock(side_effect=keyring.errors.KeyringLocked("locked"))
        fake = FakeProvider()

        with patch("keyring.get_password", failing):
            status = asyncio.run(auth_status(plaintext_config, "origin", transport=fake.transport))

        assert status is AuthStatus.NOT_CONFIGURED
        assert fake.requests == []

    def test_malformed_secrets_file_is_not_configured(self, plaintext_config: Config) -> None:
        secrets_path = plaintext_config.path.parent / "secrets.toml"
        secrets_path.write_text("origin = [broken\n")
        plaintext_config.secrets = SecretsFileSecrets(str(secrets_path))
        fake = FakeProvider()

        status = asyncio.run(auth_status(plaintext_config, "origin", transport=fake.transport))

        assert status is AuthStatus.NOT_CONFIGURED
        assert fake.requests == []

    def test_unknown_remote(self, plaintext_config: Config) -> None:
        with pytest.raises(RemoteNotFoundError):
            asyncio.run(auth_status(plaintext_config, "missing"))
