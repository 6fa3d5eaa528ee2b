"""
Git helper utilities for gritty.

Runs the local ``git`` executable for the operations that touch the working
tree: cloning a repository and wiring an existing directory to a remote.
"""

import subprocess
from pathlib import Path

from gritty.exceptions import GitCommandError
from gritty.logging import get_logger

logger = get_logger("git")


class GitHelper:
    """
    Thin wrapper around the ``git`` command line.

    Output is not captured, so progress and prompts from git reach the user's
    terminal exactly as they would when running git directly.

    Example:
        ```python
        from gritty.git import GitHelper

        git = GitHelper()
        git.clone("git@github.com:octocat/hello-world.git", "./hello-world")
        ```
    """

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def clone(self, url: str, path: str | Path, recursive: bool = False) -> None:
        """
        Clone a repository to a local path.

        Args:
            url: The repository clone URL
            path: Local directory to clone into
            recursive: Also initialize submodules

        Raises:
            GitCommandError: If git clone exits with a non-zero status
        """
        args = ["clone", url, str(path)]
        if recursive:
            args.append("--recursive")

        if self._run(args) != 0:
            raise GitCommandError(f"Failed to clone repository {url}")

    def is_repository(self, path: str | Path = ".") -> bool:
        """Return True if ``path`` already holds a ``.git`` directory."""
        return (Path(path) / ".git").exists()

    def init(self, path: str | Path = ".") -> None:
        """Initialize an empty repository in ``path``."""
        if self._run(["init"], cwd=path) != 0:
            raise GitCommandError("Failed to initialize empty git repository")

    def add_remote(self, name: str, url: str, path: str | Path = ".") -> None:
        """Register ``url`` under remote ``name``."""
        if self._run(["remote", "add", name, url], cwd=path) != 0:
            raise GitCommandError(f"Failed to add remote '{name}' for {url}")

    def pull(self, remote: str, branch: str, path: str | Path = ".") -> None:
        """Pull ``branch`` from ``remote``."""
        if self._run(["pull", remote, branch], cwd=path) != 0:
            raise GitCommandError(f"Failed to pull branch {branch} from {remote}")

    def _run(self, args: list[str], cwd: str | Path | None = None) -> int:
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, cwd=cwd)
        except OSError as e:
            raise GitCommandError(f"Failed to run {self.executable}: {e}") from e
        return result.returncode


__all__ = ["GitHelper"]
