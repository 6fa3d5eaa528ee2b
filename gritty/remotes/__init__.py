"""
Remote adapters and the factory that selects one per provider.

Example:
    ```python
    import asyncio
    from gritty import Config, ListReposInfo
    from gritty.remotes import load_remote

    async def main():
        config = Config.load_from_file()
        async with load_remote(config, "origin") as remote:
            for repo in await remote.list_repos(ListReposInfo(private=True)):
                print(repo.name)

    asyncio.run(main())
    ```
"""

from enum import Enum

import httpx

from gritty.config import Config
from gritty.exceptions import AuthenticationError, GrittyError
from gritty.git import GitHelper
from gritty.logging import get_logger
from gritty.remotes.aggregate import gather_repositories, keep_repository
from gritty.remotes.base import Remote
from gritty.remotes.gitea import GiteaRemote
from gritty.remotes.github import GitHubRemote
from gritty.remotes.gitlab import GitLabRemote
from gritty.types.remote import Provider, RemoteConfig

logger = get_logger("remote")

_ADAPTERS: dict[Provider, type[Remote]] = {
    Provider.GITHUB: GitHubRemote,
    Provider.GITLAB: GitLabRemote,
    Provider.GITEA: GiteaRemote,
}


def create_remote(
    config: RemoteConfig,
    provider: Provider,
    git: GitHelper | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Remote:
    """
    Build the adapter for ``provider``. No network call is made.

    Raises:
        UnsupportedAuthError: If the provider cannot use ``config.auth``
    """
    adapter = _ADAPTERS[Provider(provider)]
    return adapter(config, git=git, transport=transport)


def load_remote(
    config: Config,
    name: str,
    git: GitHelper | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Remote:
    """
    Resolve the remote ``name`` from the config and build its adapter.

    Raises:
        RemoteNotFoundError: If ``name`` is not registered
        AuthNotFoundError: If no credentials are stored for it
    """
    provider = config.get_remote_provider(name)
    remote_config = config.get_remote_config(name)
    return create_remote(remote_config, provider, git=git, transport=transport)


class AuthStatus(Enum):
    """Authentication state of a configured remote."""

    NOT_CONFIGURED = "not_configured"
    NOT_AUTHENTICATED = "not_authenticated"
    AUTHENTICATED = "authenticated"


async def auth_status(
    config: Config,
    name: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AuthStatus:
    """
    Report whether ``name`` has credentials and whether the provider accepts them.

    Any failure to read the stored credentials (missing entry, unreadable
    secrets file, keyring error) reports ``NOT_CONFIGURED``. Other failures of
    the authentication check propagate.

    Raises:
        RemoteNotFoundError: If ``name`` is not registered
    """
    config.get_remote_provider(name)
    try:
        config.get_auth(name)
    except GrittyError as e:
        logger.debug("No usable credentials for remote %s: %s", name, e.message)
        return AuthStatus.NOT_CONFIGURED

    try:
        remote = load_remote(config, name, transport=transport)
    except AuthenticationError:
        return AuthStatus.NOT_AUTHENTICATED

    async with remote:
        if await remote.check_auth():
            return AuthStatus.AUTHENTICATED
    return AuthStatus.NOT_AUTHENTICATED


__all__ = [
    "Remote",
    "GitHubRemote",
    "GitLabRemote",
    "GiteaRemote",
    "AuthStatus",
    "auth_status",
    "create_remote",
    "load_remote",
    "gather_repositories",
    "keep_repository",
]
