"""
Tests for the three credential backends.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import keyring.errors
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from gritty.exceptions import (
    AuthenticationError,
    AuthNotFoundError,
    DeserializationError,
    SecretsFileNotFoundError,
)
from gritty.secrets import (
    AuthConfig,
    KeyringSecrets,
    PlaintextSecrets,
    SecretsFileSecrets,
    parse_secrets,
)
from gritty.types import BasicAuth, TokenAuth

name_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Ll", "Nd"), whitelist_characters="-_"),
    min_size=1,
    max_size=20,
)
token_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_"),
    min_size=1,
    max_size=40,
)


class FakeKeyring:
    """Dictionary standing in for the OS keyring."""

    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.entries.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.entries[(service, username)] = password


@given(name=name_strategy, token=token_strategy)
@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_store_then_get_yields_token(tmp_path: Path, name: str, token: str) -> None:
    """
    For every backend, storing a token and resolving the remote returns that token.
    """
    fake = FakeKeyring()
    backends = [
        PlaintextSecrets(),
        SecretsFileSecrets(str(tmp_path / f"secrets-{name}.toml")),
        KeyringSecrets(tmp_path / "config.toml"),
    ]

    with patch("keyring.get_password", fake.get_password), patch(
        "keyring.set_password", fake.set_password
    ):
        for backend in backends:
            backend.store_token(name, token)
            assert backend.get_auth(name) == TokenAuth(token)
            assert backend.has_auth(name)


class TestAuthConfig:
    def test_token_wins_over_basic(self) -> None:
        auth = AuthConfig(username="alice", password="pw", token="abc123")
        assert auth.to_auth("origin") == TokenAuth("abc123")

    def test_basic(self) -> None:
        assert AuthConfig(username="alice", password="pw").to_auth("origin") == BasicAuth("alice", "pw")
        assert AuthConfig(username="alice").to_auth("origin") == BasicAuth("alice", "")

    def test_nothing_set(self) -> None:
        with pytest.raises(AuthNotFoundError) as exc_info:
            AuthConfig().to_auth("origin")
        assert "username/password" in exc_info.value.message
        assert "origin" in exc_info.value.message

    def test_unset_fields_are_not_persisted(self) -> None:
        assert AuthConfig(token="abc").to_dict() == {"token": "abc"}

    def test_repr_hides_secrets(self) -> None:
        assert "hunter2" not in repr(AuthConfig(username="alice", password="hunter2"))


class TestPlaintext:
    def test_missing_remote(self) -> None:
        secrets = PlaintextSecrets()
        with pytest.raises(AuthNotFoundError):
            secrets.get_auth("origin")
        assert not secrets.has_auth("origin")

    def test_to_config(self) -> None:
        secrets = PlaintextSecrets({"origin": AuthConfig(token="abc")})
        assert secrets.to_config() == {"Plaintext": {"origin": {"token": "abc"}}}
        assert secrets.inline


class TestSecretsFile:
    def test_missing_file(self, tmp_path: Path) -> None:
        secrets = SecretsFileSecrets(str(tmp_path / "nope.toml"))

        with pytest.raises(SecretsFileNotFoundError):
            secrets.get_auth("origin")
        assert not secrets.has_auth("origin")

    def test_home_directory_is_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        secrets = SecretsFileSecrets("~/.config/gritty/secrets.toml")

        secrets.store_token("origin", "abc")

        assert (tmp_path / ".config" / "gritty" / "secrets.toml").is_file()
        assert secrets.to_config() == {"SecretsFile": "~/.config/gritty/secrets.toml"}

    def test_store_keeps_other_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "secrets.toml"
        path.write_text('[upstream]\nusername = "bob"\npassword = "pw"\n')
        secrets = SecretsFileSecrets(str(path))

        secrets.store_token("origin", "abc")

        assert secrets.get_auth("upstream") == BasicAuth("bob", "pw")
        assert secrets.get_auth("origin") == TokenAuth("abc")

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "secrets.toml"
        path.write_text("origin = [not toml")

        with pytest.raises(DeserializationError):
            SecretsFileSecrets(str(path)).get_auth("origin")


class TestKeyring:
    def test_entry_is_keyed_by_config_path(self, tmp_path: Path) -> None:
        fake = FakeKeyring()
        first = KeyringSecrets(tmp_path / "a" / "config.toml")
        second = KeyringSecrets(tmp_path / "b" / "config.toml")

        with patch("keyring.get_password", fake.get_password), patch(
            "keyring.set_password", fake.set_password
        ):
            first.store_token("origin", "abc")

            assert first.get_auth("origin") == TokenAuth("abc")
            assert not second.has_auth("origin")
        assert (str((tmp_path / "a" / "config.toml").resolve()), "origin") in fake.entries

    def test_missing_entry(self, tmp_path: Path) -> None:
        with patch("keyring.get_password", return_value=None):
            with pytest.raises(AuthNotFoundError):
                KeyringSecrets(tmp_path / "config.toml").get_auth("origin")

    def test_keyring_errors_are_authentication_errors(self, tmp_path: Path) -> None:
        failing = MagicMock(side_effect=keyring.errors.PasswordSetError("denied"))
        with patch("keyring.set_password", failing):
            with pytest.raises(AuthenticationError):
                KeyringSecrets(tmp_path / "config.toml").store_token("origin", "abc")


class TestParseSecrets:
    def test_variants(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"

        assert isinstance(parse_secrets("Keyring", config_path), KeyringSecrets)
        secrets_file = parse_secrets({"SecretsFile": "~/s.toml"}, config_path)
        assert isinstance(secrets_file, SecretsFileSecrets)
        assert secrets_file.path == "~/s.toml"
        plaintext = parse_secrets({"Plaintext": {"origin": {"token": "abc"}}}, config_path)
        assert plaintext.get_auth("origin") == TokenAuth("abc")

    @pytest.mark.parametrize("value", ["Vault", {"Plaintext": "x"}, {"SecretsFile": 3}, 42])
    def test_invalid(self, tmp_path: Path, value: object) -> None:
        with pytest.raises(DeserializationError):
            parse_secrets(value, tmp_path / "config.toml")
