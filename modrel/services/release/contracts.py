"""Capability interfaces of the release pipeline.

The pipeline only talks to version control, the archiver, the release API
and the build hook through these protocols, so the decision logic can be
exercised with in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from modrel.core.result import Result
from modrel.git.repository import GitError
from modrel.services.release.errors import ReleaseError


class VersionControl(Protocol):
    def commit_count(self) -> Result[int, GitError]: ...

    def has_changes(self, exclude: Sequence[str] = ()) -> Result[bool, GitError]: ...

    def commit_all(
        self,
        message: str,
        *,
        user_name: str,
        user_email: str,
        exclude: Sequence[str] = (),
    ) -> Result[None, GitError]: ...

    def push(self) -> Result[str, GitError]: ...


class Packager(Protocol):
    def package(self, exclude_lists: Sequence[Path]) -> Result[Path, ReleaseError]:
        """Archive the working tree; returns the archive path."""
        ...


class Publisher(Protocol):
    def publish(
        self, version: str, archive: Path, *, prerelease: bool
    ) -> Result[str, ReleaseError]:
        """Create a release tagged ``version`` with ``archive`` as its asset."""
        ...


class BuildHook(Protocol):
    def run(self) -> Result[bool, ReleaseError]:
        """Run the custom build, Ok(False) when there is none."""
        ...
