"""GitHub remote adapter (REST API v3)."""

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

# GitHub answers 409 Conflict when listing the commits of an empty repository.
EMPTY_REPOSITORY_STATUS = 409


def api_url(url: str) -> str:
    """REST root for github.com or a GitHub Enterprise Server instance."""
    url = url.rstrip("/")
    if url in ("https://github.com", "http://github.com"):
        return "https://api.github.com"
    return f"{url}/api/v3"


class GitHubRemote(Remote):
    """Adapter for github.com and GitHub Enterprise Server."""

    def __init__(
        self,
        config: RemoteConfig,
        git: GitHelper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub adapter. Accepts token and basic authentication.

        Args:
            config: Resolved remote configuration
            git: Git helper used by clone_repo/add_remote
            transport: Optional httpx transport (for tests)
        """
        super().__init__(config, git)

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        auth: httpx.Auth | None = None
        if isinstance(config.auth, TokenAuth):
            headers["Authorization"] = f"Bearer {config.auth.token}"
        elif isinstance(config.auth, BasicAuth):
            auth = httpx.BasicAuth(config.auth.username, config.auth.password)

        self._transport = AsyncHTTPTransport(
            base_url=api_url(config.url),
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
            "private": create_info.private,
            "auto_init": create_info.init,
        }
        if create_info.description is not None:
            body["description"] = create_info.description
        if create_info.license is not None:
            body["license_template"] = create_info.license

        repo = await self._transport.post("/user/repos", body)
        return await self._build_repository(repo)

    async def create_fork(self, options: RepoForkOption) -> Repository:
        body: dict[str, Any] = {}
        if options.organization is not None:
            body["organization"] = options.organization
        if options.name is not None:
            body["name"] = options.name
        if options.default_branch_only is not None:
            body["default_branch_only"] = options.default_branch_only

        fork = await self._transport.post(
            f"/repos/{options.owner}/{options.repo}/forks", body
        )
        return await self._build_repository(fork)

    async def list_repos(self, list_info: ListReposInfo) -> list[Repository]:
        # The search API cannot filter on privacy; gather_repositories does it.
        query = f"user:{self._config.username}"
        if list_info.forks:
            query += " fork:true"

        result = await self._transport.get(
            "/search/repositories",
            params={
                "q": query,
                "per_page": SEARCH_PAGE_SIZE,
                "sort": "updated",
                "order": "desc",
            },
        )
        if not isinstance(result, dict) or not isinstance(result.get("items"), list):
            raise DeserializationError("Unexpected GitHub search response")

        return await gather_repositories(result["items"], self._build_repository, list_info)

    async def get_repo_info(self, name: str) -> Repository:
        repo = await self._transport.get(f"/repos/{self._config.username}/{name}")
        return await self._build_repository(repo)

    async def delete_repo(self, name: str) -> None:
        await self._transport.delete(f"/repos/{self._config.username}/{name}")
        logger.info("Deleted GitHub repository %s/%s", self._config.username, name)

    async def _build_repository(self, repo: dict[str, Any]) -> Repository:
        try:
            name = repo["name"]
            owner = (repo.get("owner") or {}).get("login") or self._config.username
        except (AttributeError, KeyError, TypeError) as e:
            raise DeserializationError(f"Malformed GitHub repository: {e!r}") from e

        commits = await self._last_commits(owner, name)
        try:
            return Repository(
                name=name,
                description=repo.get("description"),
                private=bool(repo.get("private", False)),
                fork=bool(repo.get("fork", False)),
                default_branch=repo.get("default_branch"),
                ssh_url=repo.get("ssh_url") or f"git@github.com:{owner}/{name}.git",
                clone_url=repo.get("clone_url") or f"https://github.com/{owner}/{name}.git",
                last_commits=[_to_commit(c) for c in commits[:COMMIT_COUNT]],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"Malformed GitHub commit in {name}: {e!r}") from e

    async def _last_commits(self, owner: str, name: str) -> list[dict[str, Any]]:
        try:
            return await self._transport.get(
                f"/repos/{owner}/{name}/commits",
                params={"per_page": COMMIT_COUNT},
            )
        except GrittyError as e:
            if e.status == EMPTY_REPOSITORY_STATUS:
                return []
            raise


def _to_commit(item: dict[str, Any]) -> Commit:
    commit = item["commit"]
    author = commit.get("author") or {}
    return Commit(
        sha=item["sha"],
        message=commit["message"],
        author=author.get("name") or "unknown",
        date=parse_timestamp(author.get("date")),
    )
