"""Gitea remote adapter (REST API v1)."""

from typing import Any

import httpx

from gritty.async_transport import AsyncHTTPTransport
from gritty.exceptions import DeserializationError, GrittyError
from gritty.git import GitHelper
from gritty.logging import get_logger
from gritty.remotes.aggregate import gather_repositories
from gritty.remotes.base import Remote, parse_timestamp
from gritty.types.remote import BasicAuth, RemoteConfig, TokenAuth
from gritty.types.repos import (
    COMMIT_COUNT,
    SEARCH_PAGE_SIZE,
    Commit,
    ListReposInfo,
    RepoCreateInfo,
    RepoForkOption,
    Repository,
)

logger = get_logger("remote")

# Gitea answers 409 Conflict when listing the commits of an empty repository.
EMPTY_REPOSITORY_STATUS = 409


class GiteaRemote(Remote):
    """Adapter for Gitea (and Forgejo) instances."""

    def __init__(
        self,
        config: RemoteConfig,
        git: GitHelper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Gitea adapter. Accepts token and basic authentication."""
        super().__init__(config, git)

        headers: dict[str, str] = {}
        auth: httpx.Auth | None = None
        if isinstance(config.auth, TokenAuth):
            headers["Authorization"] = f"token {config.auth.token}"
        elif isinstance(config.auth, BasicAuth):
            auth = httpx.BasicAuth(config.auth.username, config.auth.password)

        self._transport = AsyncHTTPTransport(
            base_url=f"{config.url.rstrip('/')}/api/v1",
            headers=headers,
            auth=auth,
            transport=transport,
        )

    async def close(self) -> None:
        await self._transport.close()

    async def check_auth(self) -> bool:
        try:
            await self._transport.get("/user")
        except GrittyError as e:
            if e.status in (401, 403):
                return False
            raise
        return True

    async def create_repo(self, create_info: RepoCreateInfo) -> Repository:
        body: dict[str, Any] = {
            "name": create_info.name,
            "auto_init": create_info.init,
            "private": create_info.private,
            "description": create_info.description or "",
        }
        if create_info.license is not None:
            body["license"] = create_info.license

        repo = await self._transport.post("/user/repos", body)
        return await self._build_repository(repo)

    async def create_fork(self, options: RepoForkOption) -> Repository:
        body: dict[str, Any] = {}
        if options.name is not None:
            body["name"] = options.name
        if options.organization is not None:
            body["organization"] = options.organization

        fork = await self._transport.post(
            f"/repos/{options.owner}/{options.repo}/forks", body
        )
        return await self._build_repository(fork)

    async def list_repos(self, list_info: ListReposInfo) -> list[Repository]:
        # Listing forks needs a separate request per repository, so the search
        # keeps them and gather_repositories drops them afterwards.
        user = await self._transport.get("/user")
        try:
            uid = user["id"]
        except (AttributeError, KeyError, TypeError) as e:
            raise DeserializationError(f"Malformed Gitea user: {e!r}") from e

        result = await self._transport.get(
            "/repos/search",
            params={
                "uid": uid,
                "private": str(list_info.private).lower(),
                "limit": SEARCH_PAGE_SIZE,
            },
        )
        if not isinstance(result, dict) or not isinstance(result.get("data"), list):
            raise DeserializationError("Unexpected Gitea search response")

        return await gather_repositories(result["data"], self._build_repository, list_info)

    async def get_repo_info(self, name: str) -> Repository:
        repo = await self._transport.get(f"/repos/{self._config.username}/{name}")
        return await self._build_repository(repo)

    async def delete_repo(self, name: str) -> None:
        await self._transport.delete(f"/repos/{self._config.username}/{name}")
        logger.info("Deleted Gitea repository %s/%s", self._config.username, name)

    async def _build_repository(self, repo: dict[str, Any]) -> Repository:
        try:
            name = repo["name"]
            owner = (repo.get("owner") or {}).get("login") or self._config.username
        except (AttributeError, KeyError, TypeError) as e:
            raise DeserializationError(f"Malformed Gitea repository: {e!r}") from e

        commits = await self._last_commits(owner, name)
        try:
            return Repository(
                name=name,
                description=repo.get("description"),
                private=bool(repo.get("private", False)),
                fork=bool(repo.get("fork", False)),
                default_branch=repo.get("default_branch"),
                ssh_url=repo["ssh_url"],
                clone_url=repo["clone_url"],
                last_commits=[_to_commit(c) for c in commits[:COMMIT_COUNT]],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"Malformed Gitea repository {name}: {e!r}") from e

    async def _last_commits(self, owner: str, name: str) -> list[dict[str, Any]]:
        # Stats, verification and file lists are skipped; only messages are used.
        try:
            return await self._transport.get(
                f"/repos/{owner}/{name}/commits",
                params={
                    "stat": "false",
                    "verification": "false",
                    "files": "false",
                    "limit": COMMIT_COUNT,
                },
            )
        except GrittyError as e:
            if e.status == EMPTY_REPOSITORY_STATUS:
                return []
            raise


def _to_commit(item: dict[str, Any]) -> Commit:
    author = item["commit"].get("author") or {}
    return Commit(
        sha=item["sha"],
        message=item["commit"]["message"],
        author=author.get("name") or "unknown",
        date=parse_timestamp(author.get("date")),
    )
