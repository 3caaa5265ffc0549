"""Git repository abstraction.

The release pipeline only needs a handful of git operations: count commits,
tell whether the working tree differs from HEAD, commit everything, push,
and read the ``origin`` URL. All of them return Result types.

Usage:
    repo = Repository(Path("/path/to/module"))

    match repo.commit_count():
        case Ok(count):
            print(f"{count} commits")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import ProcessError
from modrel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


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


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single ``git status --porcelain`` entry.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Working tree state relative to HEAD."""

    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if working tree has no changes."""
        return len(self.entries) == 0


class Repository:
    """Git repository rooted at ``path``.

    Satisfies the ``VersionControl`` contract of the release pipeline.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self, exclude: Sequence[str] = ()) -> Result[GitStatus, GitError]:
        """Get working tree status via ``git status --porcelain=v1``.

        Paths in ``exclude`` (relative to the repository root) are ignored.
        """
        result = self._run(["status", "--porcelain=v1", *_pathspec(exclude)])
        match result:
            case Err(e):
                return Err(_git_error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def has_changes(self, exclude: Sequence[str] = ()) -> Result[bool, GitError]:
        """True if any tracked or untracked file outside ``exclude`` differs from HEAD."""
        return self.status(exclude).map(lambda status: not status.is_clean)

    def commit_count(self) -> Result[int, GitError]:
        """Number of commits reachable from HEAD."""
        result = self._run(["rev-list", "--count", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("rev-list --count", e, "failed to count commits"))
            case Ok(stdout):
                text = stdout.strip()
                if not text.isdigit():
                    return Err(
                        GitError(
                            command="rev-list --count",
                            message=f"unexpected commit count: {text!r}",
                        )
                    )
                return Ok(int(text))

    def commit_all(
        self,
        message: str,
        *,
        user_name: str,
        user_email: str,
        exclude: Sequence[str] = (),
    ) -> Result[None, GitError]:
        """Stage every change outside ``exclude`` (``git add -A``) and commit it.

        The identity is passed per command, the user's git config is untouched.
        """
        add = self._run(["add", "-A", *_pathspec(exclude)])
        if isinstance(add, Err):
            return Err(_git_error("add -A", add.error, "git add failed"))

        commit = self._run(
            [
                "-c",
                f"user.name={user_name}",
                "-c",
                f"user.email={user_email}",
                "commit",
                "-m",
                message,
            ]
        )
        if isinstance(commit, Err):
            return Err(_git_error("commit", commit.error, "git commit failed"))
        return Ok(None)

    def push(self) -> Result[str, GitError]:
        result = self._run(["push"])
        match result:
            case Err(e):
                return Err(_git_error("push", e, "push failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def remote_url(self, remote: str = "origin") -> str | None:
        """URL of ``remote``, None if it is not configured."""
        result = self._run(["remote", "get-url", remote])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _parse_status(self, output: str) -> GitStatus:
        entries: list[StatusEntry] = []
        for line in output.splitlines():
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))
        return GitStatus(entries=tuple(entries))


def _pathspec(exclude: Sequence[str]) -> list[str]:
    if not exclude:
        return []
    return ["--", ".", *(f":(exclude){p}" for p in exclude)]


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )
