"""Git operations used by the release pipeline.

Usage:
    from modrel.git import Repository

    repo = Repository(Path("/path/to/module"))
    if repo.has_changes() == Ok(True):
        repo.commit_all("ci: Update version", user_name="bot", user_email="bot@example.com")
"""

from modrel.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
