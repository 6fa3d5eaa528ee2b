"""
Concurrent enrichment of bulk repository listings.

A provider search returns repository summaries without commit history, and some
providers cannot filter that search by privacy or fork status. ``gather_repositories``
fetches the detail of every summary concurrently and applies the filters afterwards,
identically for every provider.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from gritty.exceptions import DeserializationError, GrittyError, with_context
from gritty.logging import get_logger
from gritty.types.repos import ListReposInfo, Repository

logger = get_logger("remote")

Summary = dict[str, Any]


def keep_repository(repo: Repository, list_info: ListReposInfo) -> bool:
    """Return False for forks or private repositories the caller excluded."""
    if not list_info.forks and repo.fork:
        return False
    if not list_info.private and repo.private:
        return False
    return True


async def _fetch(
    summary: Summary,
    fetch_detail: Callable[[Summary], Awaitable[Repository]],
) -> Repository:
    if not isinstance(summary, dict):
        raise DeserializationError(f"Malformed repository summary: {summary!r}")

    name = summary.get("name", "<unnamed>")
    try:
        return await fetch_detail(summary)
    except GrittyError as e:
        raise with_context(e, f"Failed to fetch repository {name}") from e
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DeserializationError(f"Failed to fetch repository {name}: {e!r}") from e


async def gather_repositories(
    summaries: Iterable[Summary],
    fetch_detail: Callable[[Summary], Awaitable[Repository]],
    list_info: ListReposInfo,
) -> list[Repository]:
    """
    Fetch the detail of every summary concurrently and filter the results.

    One task is started per summary. All tasks run to completion, even when one
    of them fails; the first failure (in summary order) is then raised, with the
    repository name prepended to its message.

    Args:
        summaries: Raw repository objects from the provider's bulk search
        fetch_detail: Coroutine building a full Repository from one summary
        list_info: Which private/forked repositories to keep

    Returns:
        Filtered repositories, in the order of ``summaries``

    Raises:
        GrittyError: If any detail fetch failed
    """
    tasks = [asyncio.create_task(_fetch(summary, fetch_detail)) for summary in summaries]
    logger.debug("Fetching details for %d repositories", len(tasks))

    results = await asyncio.gather(*tasks, return_exceptions=True)

    repos: list[Repository] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        if keep_repository(result, list_info):
            repos.append(result)
    return repos


__all__ = ["gather_repositories", "keep_repository"]
