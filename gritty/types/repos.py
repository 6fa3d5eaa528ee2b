"""Repository-related data models."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

# Number of commits fetched per repository, identical for every provider.
COMMIT_COUNT = 25

# Page size of the bulk repository search issued by list_repos.
SEARCH_PAGE_SIZE = 100


@dataclass
class Commit:
    """A single commit, as reported by the provider."""

    sha: str
    message: str
    author: str
    date: datetime

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass
class Repository:
    """Provider-independent repository information."""

    name: str
    description: str | None
    private: bool
    fork: bool
    default_branch: str | None
    ssh_url: str
    clone_url: str
    last_commits: list[Commit] = field(default_factory=list)  # newest first

    @property
    def last_commit(self) -> Commit | None:
        """Newest known commit, or None for an empty repository."""
        return self.last_commits[0] if self.last_commits else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (dates as ISO 8601 strings)."""
        data = asdict(self)
        data["last_commits"] = [
            {**commit, "date": commit["date"].isoformat()}
            for commit in data["last_commits"]
        ]
        return data


@dataclass
class RepoCreateInfo:
    """Parameters for creating a repository."""

    name: str
    description: str | None = None
    private: bool = False
    license: str | None = None
    init: bool = False  # initialize with a README (and license, if any)


@dataclass
class RepoForkOption:
    """Parameters for forking a repository."""

    owner: str
    repo: str
    name: str | None = None  # name of the fork
    organization: str | None = None  # fork into an organization instead of the user
    default_branch_only: bool | None = None


@dataclass
class ListReposInfo:
    """Filters for listing repositories."""

    private: bool = False  # include private repositories
    forks: bool = False  # include forked repositories
