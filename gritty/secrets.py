"""
Credential storage for configured remotes.

Three interchangeable backends resolve and persist the secret of a named remote:

- ``KeyringSecrets``: the OS keyring (macOS Keychain, Windows Credential Manager,
  Secret Service, ...), keyed by config path and remote name
- ``SecretsFileSecrets``: a separate TOML file mapping remote names to credentials
- ``PlaintextSecrets``: credentials inline in the main config file

Callers only use the ``SecretsBackend`` interface; which backend is active is
decided by the config file.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import keyring
import keyring.errors

from gritty import tomlfile
from gritty.exceptions import (
    AuthenticationError,
    AuthNotFoundError,
    DeserializationError,
    NotFoundError,
    SecretsFileNotFoundError,
)
from gritty.logging import get_logger
from gritty.types.remote import Auth, BasicAuth, TokenAuth

logger = get_logger("config")


@dataclass
class AuthConfig:
    """Persisted form of a remote's credentials. A token wins over username/password."""

    username: str | None = None
    password: str | None = None
    token: str | None = None

    def __repr__(self) -> str:
        return (
            f"AuthConfig(username={self.username!r}, "
            f"password={'***' if self.password else None}, "
            f"token={'***' if self.token else None})"
        )

    @classmethod
    def from_dict(cls, data: Any) -> "AuthConfig":
        if not isinstance(data, dict):
            raise DeserializationError(f"Expected a table of credentials, got {data!r}")
        return cls(
            username=data.get("username"),
            password=data.get("password"),
            token=data.get("token"),
        )

    def to_dict(self) -> dict[str, str]:
        # TOML has no null; unset fields are left out
        data = {"username": self.username, "password": self.password, "token": self.token}
        return {key: value for key, value in data.items() if value is not None}

    def to_auth(self, remote_name: str) -> Auth:
        """
        Resolve to the Auth used by adapters.

        Raises:
            AuthNotFoundError: If neither a token nor a username is set
        """
        if self.token is not None:
            return TokenAuth(self.token)
        if self.username is not None:
            return BasicAuth(self.username, self.password or "")
        raise AuthNotFoundError(
            f"Could not find auth for remote {remote_name}.\n"
            "Did you forget to add it to the config?\n"
            "You need to set either a username/password combination, or an api token."
        )


InlineSecrets = dict[str, AuthConfig]


def parse_inline_secrets(data: Any) -> InlineSecrets:
    if not isinstance(data, dict):
        raise DeserializationError(f"Expected a table of remotes, got {data!r}")
    return {name: AuthConfig.from_dict(auth) for name, auth in data.items()}


def dump_inline_secrets(secrets: InlineSecrets) -> dict[str, dict[str, str]]:
    return {name: auth.to_dict() for name, auth in secrets.items()}


class SecretsBackend(ABC):
    """Strategy interface shared by all secret stores."""

    # True when secrets live inside the main config document, which must then be
    # saved after every store_token.
    inline = False

    @abstractmethod
    def get_auth(self, remote_name: str) -> Auth:
        """
        Resolve the credentials of ``remote_name``.

        Raises:
            AuthNotFoundError: If nothing is stored for the remote
        """

    @abstractmethod
    def store_token(self, remote_name: str, token: str) -> None:
        """Persist ``token`` as the credential of ``remote_name``."""

    @abstractmethod
    def to_config(self) -> Any:
        """Value of the ``secrets`` key in the config document."""

    def has_auth(self, remote_name: str) -> bool:
        """Return True if credentials can be resolved, without raising when absent."""
        try:
            self.get_auth(remote_name)
        except (AuthNotFoundError, NotFoundError):
            return False
        return True


class PlaintextSecrets(SecretsBackend):
    """Credentials stored inline in the main config file."""

    inline = True

    def __init__(self, secrets: InlineSecrets | None = None) -> None:
        self.secrets: InlineSecrets = secrets if secrets is not None else {}

    def get_auth(self, remote_name: str) -> Auth:
        auth = self.secrets.get(remote_name)
        if auth is None:
            raise AuthNotFoundError(
                f"Could not find auth for remote {remote_name}.\n"
                "Did you forget to add it to the config?"
            )
        return auth.to_auth(remote_name)

    def store_token(self, remote_name: str, token: str) -> None:
        self.secrets[remote_name] = AuthConfig(token=token)

    def to_config(self) -> dict[str, Any]:
        return {"Plaintext": dump_inline_secrets(self.secrets)}


class SecretsFileSecrets(SecretsBackend):
    """Credentials stored in a separate TOML file (``~`` is expanded)."""

    def __init__(self, path: str) -> None:
        self.path = path

    @property
    def resolved_path(self) -> Path:
        return Path(os.path.expanduser(self.path))

    def _load(self) -> InlineSecrets:
        return parse_inline_secrets(tomlfile.read(self.resolved_path))

    def get_auth(self, remote_name: str) -> Auth:
        path = self.resolved_path
        if not path.exists():
            raise SecretsFileNotFoundError(f"Could not find secrets file {path}.")
        return PlaintextSecrets(self._load()).get_auth(remote_name)

    def store_token(self, remote_name: str, token: str) -> None:
        path = self.resolved_path
        if not path.exists():
            tomlfile.write(path, {})

        secrets = self._load()
        secrets[remote_name] = AuthConfig(token=token)
        tomlfile.write(path, dump_inline_secrets(secrets))
        logger.info("Saved token for remote %s to %s", remote_name, path)

    def to_config(self) -> dict[str, str]:
        return {"SecretsFile": self.path}


class KeyringSecrets(SecretsBackend):
    """
    Credentials stored in the OS keyring.

    The keyring service is the canonical config path and the entry name is the
    remote name, so several config files on one machine never collide.
    """

    def __init__(self, config_path: str | Path) -> None:
        self.service = str(Path(config_path).expanduser().resolve())

    def get_auth(self, remote_name: str) -> Auth:
        try:
            token = keyring.get_password(self.service, remote_name)
        except keyring.errors.KeyringError as e:
            raise AuthenticationError(f"Keyring error: {e}") from e
        if token is None:
            raise AuthNotFoundError(
                f"Could not find auth for remote {remote_name}.\n"
                "Did you forget to add it to the keyring?"
            )
        return TokenAuth(token)

    def store_token(self, remote_name: str, token: str) -> None:
        try:
            keyring.set_password(self.service, remote_name, token)
        except keyring.errors.KeyringError as e:
            raise AuthenticationError(f"Keyring error: {e}") from e
        logger.info("Saved token for remote %s to the system keyring", remote_name)

    def to_config(self) -> str:
        return "Keyring"


def parse_secrets(value: Any, config_path: str | Path) -> SecretsBackend:
    """
    Build the backend described by the ``secrets`` value of a config document.

    Accepts ``"Keyring"``, ``{SecretsFile = "<path>"}`` or
    ``{Plaintext = {<remote> = {token = ...}}}``.

    Raises:
        DeserializationError: On any other value
    """
    if value == "Keyring":
        return KeyringSecrets(config_path)
    if isinstance(value, dict) and len(value) == 1:
        kind, payload = next(iter(value.items()))
        if kind == "SecretsFile" and isinstance(payload, str):
            return SecretsFileSecrets(payload)
        if kind == "Plaintext":
            return PlaintextSecrets(parse_inline_secrets(payload))
    raise DeserializationError(
        f"Invalid secrets setting {value!r}: expected \"Keyring\", "
        "a SecretsFile path or a Plaintext table"
    )


__all__ = [
    "AuthConfig",
    "InlineSecrets",
    "SecretsBackend",
    "PlaintextSecrets",
    "SecretsFileSecrets",
    "KeyringSecrets",
    "parse_secrets",
]
