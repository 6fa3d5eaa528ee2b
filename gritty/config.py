"""
Configuration repository: the named-remote registry persisted as TOML.

A config document holds the active secrets backend and one table per remote::

    secrets = "Keyring"

    [remotes.origin]
    provider = "GitHub"
    clone_protocol = "https"
    url = "https://github.com"
    username = "alice"

Keys gritty does not interpret (``colors`` and anything else) are kept and
written back unchanged.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gritty import tomlfile
from gritty.exceptions import (
    ConfigNotFoundError,
    DeserializationError,
    DuplicateRemoteError,
    GrittyError,
    RemoteNotFoundError,
)
from gritty.logging import get_logger
from gritty.secrets import KeyringSecrets, PlaintextSecrets, SecretsBackend, parse_secrets
from gritty.types.remote import Auth, CloneProtocol, Provider, RemoteConfig

logger = get_logger("config")

CONFIG_DIR_NAME = "gritty"
CONFIG_FILE_NAME = "config.toml"
FALLBACK_FILE_NAME = ".gritty.toml"


def default_config_path() -> Path:
    """``$XDG_CONFIG_HOME/gritty/config.toml``, XDG defaulting to ``~/.config``."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return Path(config_home) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def fallback_config_path() -> Path:
    return Path(os.path.expanduser("~")) / FALLBACK_FILE_NAME


def find_config_path() -> Path:
    """
    Return the first existing config location.

    Raises:
        ConfigNotFoundError: If neither the default nor the fallback file exists
    """
    candidates = [default_config_path(), fallback_config_path()]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(
        "Could not find a config file. Looked in "
        + " and ".join(str(c) for c in candidates)
    )


@dataclass
class GitRemoteConfig:
    """Persisted registry entry for one remote. Never holds secrets."""

    provider: Provider
    clone_protocol: CloneProtocol
    url: str
    username: str

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "GitRemoteConfig":
        try:
            return cls(
                provider=Provider(data["provider"]),
                clone_protocol=CloneProtocol(data["clone_protocol"]),
                url=str(data["url"]),
                username=str(data["username"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"Invalid config for remote {name}: {e!r}") from e

    def to_dict(self) -> dict[str, str]:
        return {
            "provider": self.provider.value,
            "clone_protocol": self.clone_protocol.value,
            "url": self.url,
            "username": self.username,
        }


@dataclass
class Config:
    """
    Loaded configuration.

    Attributes:
        remotes: Remote name to registry entry (names are case-sensitive)
        secrets: Active secrets backend
        path: File the config was loaded from and is saved to
        colors: Presentation settings, opaque to gritty
        extra: Other top-level keys, preserved on save
    """

    remotes: dict[str, GitRemoteConfig]
    secrets: SecretsBackend
    path: Path
    colors: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load_from_file(cls, path: str | Path | None = None) -> "Config":
        """
        Load a config from ``path``, or from the first default location.

        Raises:
            ConfigNotFoundError: If the file does not exist
            DeserializationError: If the document is malformed
        """
        if path is None:
            path = find_config_path()
        path = Path(path).expanduser()
        if not path.is_file():
            raise ConfigNotFoundError(f"Could not find config file {path}")

        document = tomlfile.read(path)
        return cls.from_dict(document, path)

    @classmethod
    def from_dict(cls, document: dict[str, Any], path: str | Path) -> "Config":
        document = dict(document)
        remotes_table = document.pop("remotes", {})
        if not isinstance(remotes_table, dict):
            raise DeserializationError("Invalid config: 'remotes' must be a table")
        if "secrets" not in document:
            raise DeserializationError("Invalid config: missing 'secrets' setting")

        path = Path(path)
        secrets = parse_secrets(document.pop("secrets"), path)
        colors = document.pop("colors", None)
        remotes = {
            name: GitRemoteConfig.from_dict(name, entry)
            for name, entry in remotes_table.items()
        }
        return cls(remotes=remotes, secrets=secrets, path=path, colors=colors, extra=document)

    @classmethod
    def default(cls, path: str | Path | None = None) -> "Config":
        """Empty config using the keyring backend."""
        path = Path(path).expanduser() if path is not None else default_config_path()
        return cls(remotes={}, secrets=KeyringSecrets(path), path=path)

    @classmethod
    def save_default(cls, path: str | Path | None = None) -> "Config":
        config = cls.default(path)
        config.save()
        return config

    def to_dict(self) -> dict[str, Any]:
        document: dict[str, Any] = dict(self.extra)
        document["secrets"] = self.secrets.to_config()
        if self.colors is not None:
            document["colors"] = self.colors
        document["remotes"] = {name: remote.to_dict() for name, remote in self.remotes.items()}
        return document

    def save(self) -> None:
        """Write the config to ``self.path``, creating parent directories."""
        tomlfile.write(self.path, self.to_dict())
        logger.info("Saved config to %s", self.path)

    def _get_remote(self, name: str) -> GitRemoteConfig:
        try:
            return self.remotes[name]
        except KeyError:
            raise RemoteNotFoundError(f"Could not find remote {name}") from None

    def get_remote_provider(self, name: str) -> Provider:
        return self._get_remote(name).provider

    def get_auth(self, name: str) -> Auth:
        return self.secrets.get_auth(name)

    def has_auth(self, name: str) -> bool:
        return self.secrets.has_auth(name)

    def get_remote_config(self, name: str) -> RemoteConfig:
        """
        Resolve a remote to a RemoteConfig with credentials.

        Raises:
            RemoteNotFoundError: If ``name`` is not registered (checked before secrets)
            AuthNotFoundError: If no credentials are stored for it
        """
        remote = self._get_remote(name)
        auth = self.secrets.get_auth(name)
        return RemoteConfig(
            username=remote.username,
            clone_protocol=remote.clone_protocol,
            url=remote.url,
            auth=auth,
        )

    def add_remote(self, name: str, remote: GitRemoteConfig) -> None:
        """
        Register ``remote`` under ``name`` and save.

        Nothing is changed in memory if the name is taken or the save fails.

        Raises:
            DuplicateRemoteError: If ``name`` is taken
        """
        if name in self.remotes:
            raise DuplicateRemoteError(f"Remote {name} already exists")
        self.remotes[name] = remote
        try:
            self.save()
        except GrittyError:
            del self.remotes[name]
            raise

    def store_token(self, name: str, token: str) -> None:
        """Persist a token for an existing remote through the active backend."""
        self._get_remote(name)
        if not isinstance(self.secrets, PlaintextSecrets):
            self.secrets.store_token(name, token)
            return

        previous = dict(self.secrets.secrets)
        self.secrets.store_token(name, token)
        try:
            self.save()
        except GrittyError:
            self.secrets.secrets = previous
            raise


__all__ = [
    "Config",
    "GitRemoteConfig",
    "default_config_path",
    "fallback_config_path",
    "find_config_path",
]
