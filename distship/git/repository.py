"""Git operations used to record a release.

Usage:
    repo = Repository(Path("/path/to/repo"))
    match repo.commit(["Released Alpha [ci-skip]", "a@1.2.0", "Next Release: Beta"]):
        case Ok(output):
            print(output)
        case Err(e):
            print(f"commit failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from distship.core.result import Err, Ok, Result
from distship.platform.process import ProcessError
from distship.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_SUBCOMMANDS = frozenset({"fetch", "pull", "push"})

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """A failed git subcommand, with git's own diagnostic as the message."""

    command: str
    message: str
    returncode: int = 1


class Repository:
    """The working tree the release commit is made in."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def add(self, paths: Sequence[str]) -> Result[str, GitError]:
        """Stage paths (relative to the repository root)."""
        return self._checked("add", "--", *paths)

    def commit(self, paragraphs: Sequence[str]) -> Result[str, GitError]:
        """Commit staged changes; each paragraph becomes its own -m."""
        if not paragraphs:
            return Err(GitError(command="commit", message="empty commit message"))
        flags = [arg for paragraph in paragraphs for arg in ("-m", paragraph)]
        return self._checked("commit", *flags)

    def push(self) -> Result[str, GitError]:
        """Push the current branch to its upstream."""
        return self._checked("push")

    def _checked(self, subcommand: str, *args: str) -> Result[str, GitError]:
        match self._run([subcommand, *args]):
            case Ok(stdout):
                return Ok(stdout.strip())
            case Err(e):
                message = e.stderr.strip() or e.stdout.strip() or f"git {subcommand} failed"
                return Err(GitError(command=subcommand, message=message, returncode=e.returncode))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if args[0] in _NETWORK_SUBCOMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
