"""Remote connection data models."""

from dataclasses import dataclass, field
from enum import Enum


class Provider(Enum):
    """Supported Git-hosting providers. Each maps to one adapter."""

    GITHUB = "GitHub"
    GITLAB = "GitLab"
    GITEA = "Gitea"

    @classmethod
    def _missing_(cls, value: object) -> "Provider | None":
        # Accept "github", "GITLAB", ... as typed on a command line
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class CloneProtocol(Enum):
    """Protocol used to build clone URLs. Does not affect REST calls."""

    SSH = "ssh"
    HTTPS = "https"

    @classmethod
    def _missing_(cls, value: object) -> "CloneProtocol | None":
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


@dataclass(frozen=True)
class TokenAuth:
    """Authenticate with an API token."""

    token: str = field(repr=False)


@dataclass(frozen=True)
class BasicAuth:
    """Authenticate with a username and password."""

    username: str
    password: str = field(repr=False)


Auth = TokenAuth | BasicAuth


@dataclass(frozen=True)
class RemoteConfig:
    """Fully resolved configuration for one remote, built per invocation."""

    username: str
    clone_protocol: CloneProtocol
    url: str
    auth: Auth
