"""Git repository abstraction for release tagging.

All operations return Result types.

Usage:
    repo = Repository(Path("."))
    if repo.current_branch() != "master":
        ...
    match repo.create_tag("v0.1.0", message="Release v0.1.0"):
        case Ok(_):
            repo.push_tag("v0.1.0")
        case Err(e):
            print(f"tag failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gorel.core.result import Err, Ok, Result
from gorel.platform.process import ProcessError
from gorel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A single git checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def create_tag(self, tag: str, *, message: str) -> Result[None, GitError]:
        """Create an annotated tag at HEAD."""
        result = self._run(["tag", "-a", tag, "-m", message])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="tag",
                        message=e.stderr.strip() or "git tag failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(None)

    def push_tag(self, tag: str, *, remote: str = "origin") -> Result[None, GitError]:
        result = self._run(["push", remote, tag])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="push",
                        message=e.stderr.strip() or e.stdout.strip() or "push failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
