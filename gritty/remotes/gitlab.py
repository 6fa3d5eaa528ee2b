"""GitLab remote adapter (REST API v4)."""

from typing import Any
from urllib.parse import quote

import httpx

from gritty.async_transport import AsyncHTTPTransport
from gritty.exceptions import DeserializationError, GrittyError, UnsupportedAuthError
from gritty.git import GitHelper
from gritty.logging import get_logger
from gritty.remotes.aggregate import gather_repositories
from gritty.remotes.base import Remote, parse_timestamp
from gritty.types.remote import RemoteConfig, TokenAuth
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


def project_path(name: str) -> str:
    """GitLab derives a project's path from its name: lower case, spaces as dashes."""
    return name.replace(" ", "-").lower()


def project_id(owner: str, name: str) -> str:
    """URL-encoded ``owner/path`` identifier accepted wherever a project id is."""
    return quote(f"{owner}/{project_path(name)}", safe="")


class GitLabRemote(Remote):
    """Adapter for gitlab.com and self-managed GitLab instances."""

    def __init__(
        self,
        config: RemoteConfig,
        git: GitHelper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitLab adapter.

        Raises:
            UnsupportedAuthError: If the config does not carry a token
        """
        if not isinstance(config.auth, TokenAuth):
            raise UnsupportedAuthError("Only token authentication is supported for GitLab")

        super().__init__(config, git)
        self._transport = AsyncHTTPTransport(
            base_url=f"{config.url.rstrip('/')}/api/v4",
            headers={"PRIVATE-TOKEN": config.auth.token},
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
        if create_info.license is not None:
            logger.warning("License templates are not supported by GitLab. Ignoring.")

        body: dict[str, Any] = {
            "name": create_info.name,
            "visibility": "private" if create_info.private else "public",
            "initialize_with_readme": create_info.init,
        }
        if create_info.description is not None:
            body["description"] = create_info.description

        project = await self._transport.post("/projects", body)
        return await self._build_repository(project)

    async def create_fork(self, options: RepoForkOption) -> Repository:
        body: dict[str, Any] = {}
        if options.name is not None:
            body["name"] = options.name
            body["path"] = project_path(options.name)
        if options.organization is not None:
            body["namespace_path"] = options.organization

        project = await self._transport.post(
            f"/projects/{project_id(options.owner, options.repo)}/fork", body
        )
        return await self._build_repository(project)

    async def list_repos(self, list_info: ListReposInfo) -> list[Repository]:
        # Fork status is only known per project, so forks are dropped afterwards.
        params: dict[str, Any] = {"owned": "true", "per_page": SEARCH_PAGE_SIZE}
        if not list_info.private:
            params["visibility"] = "public"

        projects = await self._transport.get("/projects", params=params)
        if not isinstance(projects, list):
            raise DeserializationError("Unexpected GitLab projects response")

        return await gather_repositories(projects, self._build_repository, list_info)

    async def get_repo_info(self, name: str) -> Repository:
        project = await self._transport.get(
            f"/projects/{project_id(self._config.username, name)}"
        )
        return await self._build_repository(project)

    async def delete_repo(self, name: str) -> None:
        await self._transport.delete(f"/projects/{project_id(self._config.username, name)}")
        logger.info("Deleted GitLab project %s/%s", self._config.username, name)

    async def _build_repository(self, project: dict[str, Any]) -> Repository:
        try:
            if project.get("empty_repo"):
                commits: list[dict[str, Any]] = []
            else:
                commits = await self._transport.get(
                    f"/projects/{project['id']}/repository/commits",
                    params={"per_page": COMMIT_COUNT},
                )

            return Repository(
                name=project["name"],
                description=project.get("description"),
                private=project.get("visibility") == "private",
                fork=project.get("forked_from_project") is not None,
                default_branch=project.get("default_branch"),
                ssh_url=project["ssh_url_to_repo"],
                clone_url=project["http_url_to_repo"],
                last_commits=[_to_commit(c) for c in commits[:COMMIT_COUNT]],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"Malformed GitLab project: {e!r}") from e


def _to_commit(item: dict[str, Any]) -> Commit:
    return Commit(
        sha=item["id"],
        message=item["message"],
        author=item.get("author_name") or "unknown",
        date=parse_timestamp(item.get("committed_date")),
    )
