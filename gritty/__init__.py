"""Gritty - manage repositories on GitHub, GitLab and Gitea through one interface."""

from gritty.config import Config, GitRemoteConfig
from gritty.exceptions import (
    AuthenticationError,
    AuthNotFoundError,
    ConfigNotFoundError,
    DeserializationError,
    DuplicateRemoteError,
    ErrorKind,
    GitCommandError,
    GrittyError,
    NotFoundError,
    RemoteNotFoundError,
    SecretsFileNotFoundError,
    SerializationError,
    UnsupportedAuthError,
)
from gritty.git import GitHelper
from gritty.logging import configure_logging, get_logger
from gritty.remotes import (
    AuthStatus,
    GiteaRemote,
    GitHubRemote,
    GitLabRemote,
    Remote,
    auth_status,
    create_remote,
    load_remote,
)
from gritty.secrets import (
    AuthConfig,
    KeyringSecrets,
    PlaintextSecrets,
    SecretsBackend,
    SecretsFileSecrets,
)
from gritty.types import (
    BasicAuth,
    CloneProtocol,
    Commit,
    ListReposInfo,
    Provider,
    RemoteConfig,
    RepoCreateInfo,
    RepoForkOption,
    Repository,
    TokenAuth,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "Config",
    "GitRemoteConfig",
    # Secrets
    "SecretsBackend",
    "KeyringSecrets",
    "SecretsFileSecrets",
    "PlaintextSecrets",
    "AuthConfig",
    # Remotes
    "Remote",
    "GitHubRemote",
    "GitLabRemote",
    "GiteaRemote",
    "create_remote",
    "load_remote",
    "auth_status",
    "AuthStatus",
    # Git Helper
    "GitHelper",
    # Types
    "Provider",
    "CloneProtocol",
    "TokenAuth",
    "BasicAuth",
    "RemoteConfig",
    "Repository",
    "Commit",
    "RepoCreateInfo",
    "RepoForkOption",
    "ListReposInfo",
    # Exceptions
    "ErrorKind",
    "GrittyError",
    "NotFoundError",
    "SerializationError",
    "DeserializationError",
    "AuthenticationError",
    "AuthNotFoundError",
    "ConfigNotFoundError",
    "SecretsFileNotFoundError",
    "RemoteNotFoundError",
    "DuplicateRemoteError",
    "UnsupportedAuthError",
    "GitCommandError",
    # Logging
    "configure_logging",
    "get_logger",
]
