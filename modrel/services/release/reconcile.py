"""Version reconciliation between the metadata file and the update feed.

Runs only on initialized projects:

1. The version code is recomputed as ``commit_count + 1`` on every run,
   whether or not anything else changed. With the bump disabled the code
   written in the metadata file must be an integer.
2. Without a feed record there is nothing to validate or sync.
3. A feed that advertises a newer version label *and* a higher version code
   than the metadata is a downgrade and fails the run.
4. Otherwise the feed's version, version code and archive URL are rewritten
   to match the metadata. The changelog URL is left alone.
"""

from __future__ import annotations

from dataclasses import replace

from modrel.core.result import Err, Ok, Result
from modrel.services.release.errors import ReleaseError
from modrel.services.release.identity import RepositoryIdentity
from modrel.services.release.model import FeedRecord, ModuleMetadata, Reconciliation
from modrel.services.release.versioning import version_aware_max


def next_version_code(commit_count: int) -> int:
    return commit_count + 1


def check_downgrade(metadata: ModuleMetadata, feed: FeedRecord) -> ReleaseError | None:
    latest = version_aware_max(metadata.version, feed.version)
    if latest != metadata.version and metadata.version_code < feed.version_code:
        return ReleaseError(
            kind="downgrade",
            message=(
                f"Downgrade detected! The update feed advertises {feed.version} "
                f"(versionCode {feed.version_code}), newer than "
                f"{metadata.version} (versionCode {metadata.version_code})."
            ),
            hint="bump version in the metadata file above the published one",
        )
    return None


def has_drift(metadata: ModuleMetadata, feed: FeedRecord, identity: RepositoryIdentity) -> bool:
    return (
        feed.version != metadata.version
        or feed.version_code != metadata.version_code
        or feed.zip_url != identity.zip_url(metadata.version)
    )


def sync_feed(metadata: ModuleMetadata, feed: FeedRecord, identity: RepositoryIdentity) -> FeedRecord:
    return replace(
        feed,
        version=metadata.version,
        version_code=metadata.version_code,
        zip_url=identity.zip_url(metadata.version),
    )


def reconcile(
    metadata: ModuleMetadata,
    feed: FeedRecord | None,
    *,
    commit_count: int,
    identity: RepositoryIdentity,
    bump_version_code: bool = True,
) -> Result[Reconciliation, ReleaseError]:
    updated = metadata
    if bump_version_code:
        updated = replace(
            metadata, version_code=next_version_code(commit_count), raw_version_code=None
        )
    elif metadata.raw_version_code is not None:
        return Err(
            ReleaseError(
                kind="invalid_metadata",
                message=f"versionCode is not an integer: {metadata.raw_version_code!r}",
                hint="set an integer versionCode or enable bump_version_code",
            )
        )
    metadata_changed = updated != metadata

    if feed is None:
        return Ok(
            Reconciliation(
                metadata=updated,
                feed=None,
                metadata_changed=metadata_changed,
                feed_changed=False,
            )
        )

    downgrade = check_downgrade(updated, feed)
    if downgrade is not None:
        return Err(downgrade)

    if not has_drift(updated, feed, identity):
        return Ok(
            Reconciliation(
                metadata=updated,
                feed=feed,
                metadata_changed=metadata_changed,
                feed_changed=False,
            )
        )

    return Ok(
        Reconciliation(
            metadata=updated,
            feed=sync_feed(updated, feed, identity),
            metadata_changed=metadata_changed,
            feed_changed=True,
        )
    )
