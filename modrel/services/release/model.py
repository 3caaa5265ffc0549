from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

TriggerEvent = Literal["push", "manual"]
RunOutcome = Literal["skipped", "noop", "initialized", "published"]

INITIAL_VERSION = "v0.1.0"
INITIAL_VERSION_CODE = 1


@dataclass(frozen=True, slots=True)
class ModuleMetadata:
    """Identity-and-version record stored in the metadata file."""

    id: str = ""
    name: str = ""
    version: str = ""
    version_code: int = 0
    author: str = ""
    description: str = ""
    update_json: str = ""  # URL of the feed record
    # versionCode text as written when it is not an integer; version_code is 0 then.
    raw_version_code: str | None = None


@dataclass(frozen=True, slots=True)
class FeedRecord:
    """Update-feed record polled by end-user clients."""

    version: str
    version_code: int
    zip_url: str
    changelog: str
    # Keys we do not manage, kept in file order.
    extra: tuple[tuple[str, object], ...] = ()


@dataclass(frozen=True, slots=True)
class Trigger:
    """What started this run.

    ``changed_paths`` is None when the caller does not know which files the
    triggering push touched; the run then assumes it is relevant.
    """

    event: TriggerEvent = "push"
    changed_paths: tuple[str, ...] | None = None

    @property
    def is_prerelease(self) -> bool:
        return self.event == "manual"

    def applies_to(self, metadata_path: str) -> bool:
        if self.event == "manual" or self.changed_paths is None:
            return True
        return metadata_path in self.changed_paths


@dataclass(frozen=True, slots=True)
class Reconciliation:
    metadata: ModuleMetadata
    feed: FeedRecord | None
    metadata_changed: bool
    feed_changed: bool


@dataclass(frozen=True, slots=True)
class RunReport:
    outcome: RunOutcome
    version: str | None = None
    version_code: int | None = None
    committed: bool = False
    archive: str | None = None
    release: str | None = None
