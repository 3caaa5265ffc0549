"""Release publishing through the GitHub CLI.

One call creates the tag, the release and uploads the archive as its only
asset. Failures are reported as-is and never retried; a tag that already
exists surfaces as ``publish_collision``.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import ProcessError
from modrel.platform.process import run as run_process
from modrel.services.release.errors import ReleaseError
from modrel.services.release.timeouts import GH_UPLOAD_TIMEOUT_SECONDS

_COLLISION_MARKERS = (
    "already exists",
    "already_exists",
)


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def _is_collision(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _COLLISION_MARKERS)


def release_title(version: str) -> str:
    return f"Release {version}"


def release_command(version: str, archive: Path, *, prerelease: bool) -> list[str]:
    cmd = [
        "gh",
        "release",
        "create",
        version,
        str(archive),
        "--title",
        release_title(version),
        "--notes",
        "",
    ]
    if prerelease:
        cmd.append("--prerelease")
    return cmd


@dataclass(frozen=True, slots=True)
class GhPublisher:
    root: Path
    timeout: float = GH_UPLOAD_TIMEOUT_SECONDS

    def publish(self, version: str, archive: Path, *, prerelease: bool) -> Result[str, ReleaseError]:
        available = ensure_gh_available()
        if isinstance(available, Err):
            return available

        result = run_process(
            release_command(version, archive, prerelease=prerelease),
            cwd=self.root,
            timeout=self.timeout,
        )
        if isinstance(result, Err):
            e = result.error
            if _is_collision(e):
                return Err(
                    ReleaseError(
                        kind="publish_collision",
                        message=f"release {version} already exists",
                        hint="bump version in the metadata file",
                    )
                )
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"gh release create {version} failed",
                    hint=e.stderr.strip() or None,
                )
            )

        # gh prints the release URL on success.
        lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
        return Ok(lines[-1] if lines else version)
