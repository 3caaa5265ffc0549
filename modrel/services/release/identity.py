"""Repository identity and the deterministic URLs derived from it.

The identity is recomputed on every run from the hosting location
(``owner/name``) and is never persisted on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from modrel.core.result import Err, Ok, Result
from modrel.services.release.errors import ReleaseError

_SLUG_RE = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")
_REMOTE_RE = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")

RAW_BASE_URL = "https://raw.githubusercontent.com"
WEB_BASE_URL = "https://github.com"


def title_from_slug(slug: str) -> str:
    """``my-cool_module`` -> ``My Cool Module``.

    Separators become spaces and the first character of every word is
    upper-cased; the rest of each word is left as written.
    """
    spaced = re.sub(r"[-_]", " ", slug)
    return re.sub(r"\b(.)", lambda m: m.group(1).upper(), spaced)


@dataclass(frozen=True, slots=True)
class RepositoryIdentity:
    owner: str
    slug: str
    branch: str = "master"
    feed_file: str = "update.json"
    changelog_file: str = "changelog.md"
    asset: str = "install.zip"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.slug}"

    @property
    def title(self) -> str:
        return title_from_slug(self.slug)

    @property
    def feed_url(self) -> str:
        return f"{RAW_BASE_URL}/{self.full_name}/{self.branch}/{self.feed_file}"

    @property
    def changelog_url(self) -> str:
        return f"{RAW_BASE_URL}/{self.full_name}/{self.branch}/{self.changelog_file}"

    def zip_url(self, version: str) -> str:
        return f"{WEB_BASE_URL}/{self.full_name}/releases/download/{version}/{self.asset}"


def parse_full_name(full_name: str) -> Result[tuple[str, str], ReleaseError]:
    """Split ``owner/name`` into its parts."""
    m = _SLUG_RE.match(full_name.strip())
    if m is None:
        return Err(
            ReleaseError(
                kind="invalid_identity",
                message=f"invalid repository name: {full_name!r}",
                hint="expected owner/name",
            )
        )
    return Ok((m.group(1), m.group(2)))


def full_name_from_remote(url: str) -> str | None:
    """Extract ``owner/name`` from a GitHub remote URL (https or ssh)."""
    m = _REMOTE_RE.search(url.strip())
    if m is None:
        return None
    return f"{m.group(1)}/{m.group(2)}"
