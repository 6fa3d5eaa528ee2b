"""Gritty type definitions.

This module exports all data model types used by gritty.
"""

from gritty.types.remote import (
    Auth,
    BasicAuth,
    CloneProtocol,
    Provider,
    RemoteConfig,
    TokenAuth,
)
from gritty.types.repos import (
    COMMIT_COUNT,
    SEARCH_PAGE_SIZE,
    Commit,
    ListReposInfo,
    RepoCreateInfo,
    RepoForkOption,
    Repository,
)

__all__ = [
    # Remote types
    "Provider",
    "CloneProtocol",
    "Auth",
    "TokenAuth",
    "BasicAuth",
    "RemoteConfig",
    # Repository types
    "Repository",
    "Commit",
    "RepoCreateInfo",
    "RepoForkOption",
    "ListReposInfo",
    "COMMIT_COUNT",
    "SEARCH_PAGE_SIZE",
]
