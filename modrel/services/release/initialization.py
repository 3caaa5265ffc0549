"""First-run detection and project initialization.

A project counts as initialized when its metadata file names the hosting
repository, either by ``id`` (the repository slug) or by ``name`` (the
title derived from it). Anything else, including a missing file, gets a
fresh set of metadata, changelog, feed and README.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from modrel.services.release.identity import RepositoryIdentity
from modrel.services.release.model import (
    INITIAL_VERSION,
    INITIAL_VERSION_CODE,
    FeedRecord,
    ModuleMetadata,
)

ID_PLACEHOLDER = "{{ID}}"
NAME_PLACEHOLDER = "{{NAME}}"


@dataclass(frozen=True, slots=True)
class InitBundle:
    metadata: ModuleMetadata
    feed: FeedRecord
    changelog: str
    readme: str


def is_initialized(metadata: ModuleMetadata | None, identity: RepositoryIdentity) -> bool:
    if metadata is None:
        return False
    prop_id = metadata.id.strip()
    prop_name = metadata.name.strip()
    id_matches = bool(prop_id) and prop_id == identity.slug
    name_matches = bool(prop_name) and prop_name == identity.title
    return id_matches or name_matches


def changelog_heading(version: str, day: date) -> str:
    return f"### {version} - {day.strftime('%Y.%m.%d')}"


def initial_changelog(day: date, existing: str | None = None) -> str:
    """Seed the changelog with the initial release entry.

    The entry is prepended to an existing changelog, unless that changelog
    already starts with the very same heading.
    """
    heading = changelog_heading(INITIAL_VERSION, day)
    entry = f"{heading}\n* Initial release\n"
    if not existing or not existing.strip():
        return entry
    if existing.lstrip().splitlines()[0].strip() == heading:
        return existing
    return f"{entry}\n{existing}"


def initial_readme(identity: RepositoryIdentity, existing: str | None = None) -> str:
    if existing is None:
        return f"# {identity.title}\n"
    return existing.replace(ID_PLACEHOLDER, identity.slug).replace(
        NAME_PLACEHOLDER, identity.title
    )


def initialize(
    identity: RepositoryIdentity,
    *,
    today: date,
    existing_changelog: str | None = None,
    existing_readme: str | None = None,
) -> InitBundle:
    """Build the first-run metadata, feed, changelog and README."""
    metadata = ModuleMetadata(
        id=identity.slug,
        name=identity.title,
        version=INITIAL_VERSION,
        version_code=INITIAL_VERSION_CODE,
        author=identity.owner,
        description=identity.title,
        update_json=identity.feed_url,
    )
    feed = FeedRecord(
        version=INITIAL_VERSION,
        version_code=INITIAL_VERSION_CODE,
        zip_url=identity.zip_url(INITIAL_VERSION),
        changelog=identity.changelog_url,
    )
    return InitBundle(
        metadata=metadata,
        feed=feed,
        changelog=initial_changelog(today, existing_changelog),
        readme=initial_readme(identity, existing_readme),
    )
