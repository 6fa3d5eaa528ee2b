"""Abstract base class for remote adapters."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gritty.exceptions import GitCommandError
from gritty.git import GitHelper
from gritty.types.remote import CloneProtocol, RemoteConfig
from gritty.types.repos import ListReposInfo, RepoCreateInfo, RepoForkOption, Repository


class Remote(ABC):
    """
    Common interface of every Git-hosting provider adapter.

    Adapters hold only immutable state (their RemoteConfig and an HTTP
    transport), so concurrent tasks may share one instance freely.

    Example:
        ```python
        import asyncio
        from gritty.remotes import create_remote
        from gritty.types import CloneProtocol, Provider, RemoteConfig, TokenAuth

        async def main():
            config = RemoteConfig(
                username="octocat",
                clone_protocol=CloneProtocol.HTTPS,
                url="https://github.com",
                auth=TokenAuth("your-gh-token"),
            )
            async with create_remote(config, Provider.GITHUB) as remote:
                if await remote.check_auth():
                    repo = await remote.get_repo_info("hello-world")

        asyncio.run(main())
        ```
    """

    def __init__(self, config: RemoteConfig, git: GitHelper | None = None) -> None:
        self._config = config
        self._git = git or GitHelper()

    @abstractmethod
    async def check_auth(self) -> bool:
        """Return False if the provider rejects the credentials (401/403)."""

    @abstractmethod
    async def create_repo(self, create_info: RepoCreateInfo) -> Repository:
        """Create a new repository and return it."""

    @abstractmethod
    async def create_fork(self, options: RepoForkOption) -> Repository:
        """Fork a repository and return the newly created fork."""

    @abstractmethod
    async def list_repos(self, list_info: ListReposInfo) -> list[Repository]:
        """List the user's repositories, filtered by ``list_info``."""

    @abstractmethod
    async def get_repo_info(self, name: str) -> Repository:
        """Get one of the user's repositories, including its last commits."""

    @abstractmethod
    async def delete_repo(self, name: str) -> None:
        """
        Delete a repository.

        WARNING: does not ask for confirmation and is irreversible.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""

    def get_config(self) -> RemoteConfig:
        return self._config

    async def __aenter__(self) -> "Remote":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def clone_url(self, username: str, repo_name: str) -> str:
        """
        Build the clone URL of ``username/repo_name`` for the configured protocol.

        SSH: ``git@<host>:<user>/<repo>.git``; HTTPS: ``<url>/<user>/<repo>.git``.
        """
        url = self._config.url.rstrip("/")
        if self._config.clone_protocol is CloneProtocol.SSH:
            host = url.replace("https://", "").replace("http://", "")
            return f"git@{host}:{username}/{repo_name}.git"
        return f"{url}/{username}/{repo_name}.git"

    async def clone_repo(self, name: str, path: str | Path, recursive: bool = False) -> None:
        """
        Clone one of the user's repositories to ``path``.

        Raises:
            GitCommandError: If git cannot be run or exits with a non-zero status
        """
        url = self.clone_url(self._config.username, name)
        try:
            await asyncio.to_thread(self._git.clone, url, path, recursive)
        except GitCommandError as e:
            raise GitCommandError(f"Failed to clone repository {name}") from e

    async def add_remote(
        self,
        repo_name: str,
        branch: str | None = None,
        path: str | Path = ".",
    ) -> None:
        """
        Register ``repo_name`` as ``origin`` of the local repository at ``path``.

        The directory is initialized as a git repository first if needed, and
        ``branch`` is pulled when given.
        """
        url = self.clone_url(self._config.username, repo_name)

        if not self._git.is_repository(path):
            await asyncio.to_thread(self._git.init, path)

        try:
            await asyncio.to_thread(self._git.add_remote, "origin", url, path)
        except GitCommandError as e:
            raise GitCommandError(
                f"Failed to add remote 'origin' for repository {repo_name}"
            ) from e

        if branch is not None:
            try:
                await asyncio.to_thread(self._git.pull, "origin", branch, path)
            except GitCommandError as e:
                raise GitCommandError(
                    f"Failed to pull branch {branch} from repository {repo_name}"
                ) from e


def parse_timestamp(value: str | None) -> datetime:
    """
    Parse an ISO 8601 timestamp from a provider payload into an aware datetime.

    Missing values map to the Unix epoch, matching how commits without an author
    date are reported.
    """
    if not value:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
