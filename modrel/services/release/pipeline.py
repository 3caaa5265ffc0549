"""Release run: a fixed sequence of stages, each returning a Result.

    trigger check -> build hook -> load -> plan (initialize | reconcile)
    -> apply -> change check -> commit/push -> package -> publish

Any Err ends the run on the spot. Packaging and publishing come last, so a
failure anywhere earlier never leaves a half-published release behind. A run
that initializes the project stops after its commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from modrel.core.config import Config
from modrel.core.result import Err, Ok, Result
from modrel.git.repository import GitError
from modrel.output.console import ConsoleProtocol, Style
from modrel.platform.files import atomic_write_text, read_text_if_exists
from modrel.services.release.contracts import BuildHook, Packager, Publisher, VersionControl
from modrel.services.release.errors import ReleaseError
from modrel.services.release.feed_store import read_feed, write_feed
from modrel.services.release.identity import RepositoryIdentity
from modrel.services.release.initialization import InitBundle, initialize, is_initialized
from modrel.services.release.metadata_store import read_metadata, render_metadata, write_metadata
from modrel.services.release.model import (
    FeedRecord,
    ModuleMetadata,
    Reconciliation,
    RunReport,
    Trigger,
)
from modrel.services.release.reconcile import reconcile

INIT_COMMIT_MESSAGE = "ci: Initialize project"


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    root: Path
    config: Config
    identity: RepositoryIdentity
    trigger: Trigger
    today: date

    def path(self, rel: str) -> Path:
        return self.root / rel


@dataclass(frozen=True, slots=True)
class Collaborators:
    vcs: VersionControl
    packager: Packager
    publisher: Publisher
    build: BuildHook


@dataclass(frozen=True, slots=True)
class LoadedState:
    metadata: ModuleMetadata | None
    feed: FeedRecord | None


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Exactly one of ``init`` and ``reconciliation`` is set."""

    init: InitBundle | None = None
    reconciliation: Reconciliation | None = None

    @property
    def metadata(self) -> ModuleMetadata:
        if self.init is not None:
            return self.init.metadata
        assert self.reconciliation is not None
        return self.reconciliation.metadata


def update_commit_message(version: str) -> str:
    return f"ci: Update version to {version}"


def _git_failed(error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"git {error.command} failed", hint=error.message)


def load_state(ctx: ReleaseContext) -> Result[LoadedState, ReleaseError]:
    files = ctx.config.files
    metadata = read_metadata(ctx.path(files.metadata))
    if isinstance(metadata, Err):
        return metadata
    feed = read_feed(ctx.path(files.feed))
    if isinstance(feed, Err):
        return feed
    return Ok(LoadedState(metadata=metadata.value, feed=feed.value))


def _read_init_inputs(
    ctx: ReleaseContext,
) -> Result[tuple[str | None, str | None], ReleaseError]:
    """Existing changelog and README; only initialization uses them."""
    files = ctx.config.files
    try:
        changelog = read_text_if_exists(ctx.path(files.changelog))
        readme = read_text_if_exists(ctx.path(files.readme))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="io_failed", message=str(e)))
    return Ok((changelog, readme))


def plan_release(
    ctx: ReleaseContext,
    state: LoadedState,
    vcs: VersionControl,
    console: ConsoleProtocol,
) -> Result[ReleasePlan, ReleaseError]:
    """Decide between initialization and reconciliation; writes nothing."""
    identity = ctx.identity
    console.print(f"repository: {identity.full_name} ({identity.title})", Style.DIM)

    if state.metadata is None:
        console.info("project not initialized, starting setup")
    elif is_initialized(state.metadata, identity):
        console.info("project already initialized, skipping setup")
    else:
        console.warning(
            f"{ctx.config.files.metadata} content does not match repository, re-initializing"
        )

    if state.metadata is None or not is_initialized(state.metadata, identity):
        inputs = _read_init_inputs(ctx)
        if isinstance(inputs, Err):
            return inputs
        changelog, readme = inputs.value
        bundle = initialize(
            identity,
            today=ctx.today,
            existing_changelog=changelog,
            existing_readme=readme,
        )
        return Ok(ReleasePlan(init=bundle))

    count = vcs.commit_count()
    if isinstance(count, Err):
        return Err(_git_failed(count.error))

    if state.feed is None:
        console.print(f"{ctx.config.files.feed} not found, skipping validation", Style.DIM)

    result = reconcile(
        state.metadata,
        state.feed,
        commit_count=count.value,
        identity=identity,
        bump_version_code=ctx.config.release.bump_version_code,
    )
    if isinstance(result, Err):
        return result

    rec = result.value
    console.print(
        f"metadata: version={rec.metadata.version}, versionCode={rec.metadata.version_code}",
        Style.DIM,
    )
    if rec.feed_changed:
        console.info(f"{ctx.config.files.feed} out of sync, updating it")
    return Ok(ReleasePlan(reconciliation=rec))


def apply_plan(ctx: ReleaseContext, plan: ReleasePlan) -> Result[None, ReleaseError]:
    files = ctx.config.files

    if plan.init is not None:
        bundle = plan.init
        try:
            atomic_write_text(ctx.path(files.metadata), render_metadata(bundle.metadata))
            atomic_write_text(ctx.path(files.changelog), bundle.changelog)
            atomic_write_text(ctx.path(files.readme), bundle.readme)
        except OSError as e:
            return Err(ReleaseError(kind="io_failed", message=f"initialization failed: {e}"))
        return write_feed(ctx.path(files.feed), bundle.feed)

    rec = plan.reconciliation
    assert rec is not None
    written = write_metadata(ctx.path(files.metadata), rec.metadata)
    if isinstance(written, Err):
        return written
    if rec.feed is not None and rec.feed_changed:
        return write_feed(ctx.path(files.feed), rec.feed)
    return Ok(None)


def commit_changes(
    ctx: ReleaseContext,
    vcs: VersionControl,
    message: str,
    console: ConsoleProtocol,
) -> Result[bool, ReleaseError]:
    """Commit and push every change; Ok(False) when the tree is clean."""
    # The archive is a build output, never part of a commit.
    exclude = (ctx.config.release.asset,)
    changes = vcs.has_changes(exclude)
    if isinstance(changes, Err):
        return Err(_git_failed(changes.error))
    if not changes.value:
        console.print("no file changes detected, nothing to commit", Style.DIM)
        return Ok(False)

    console.print(f"commit: {message}", Style.DIM)
    git = ctx.config.git
    committed = vcs.commit_all(
        message, user_name=git.user_name, user_email=git.user_email, exclude=exclude
    )
    if isinstance(committed, Err):
        return Err(_git_failed(committed.error))

    if ctx.config.release.push:
        pushed = vcs.push()
        if isinstance(pushed, Err):
            return Err(_git_failed(pushed.error))
    return Ok(True)


def exclude_lists(ctx: ReleaseContext) -> list[Path]:
    return [ctx.path(name) for name in ctx.config.release.ignore_files]


def run_release(
    ctx: ReleaseContext,
    collaborators: Collaborators,
    console: ConsoleProtocol,
) -> Result[RunReport, ReleaseError]:
    metadata_file = ctx.config.files.metadata
    if not ctx.trigger.applies_to(metadata_file):
        console.info(f"{metadata_file} not among changed files, skipping")
        return Ok(RunReport(outcome="skipped"))

    built = collaborators.build.run()
    if isinstance(built, Err):
        return built
    if built.value:
        console.success("custom build finished")

    state = load_state(ctx)
    if isinstance(state, Err):
        return state

    plan = plan_release(ctx, state.value, collaborators.vcs, console)
    if isinstance(plan, Err):
        return plan
    metadata = plan.value.metadata

    applied = apply_plan(ctx, plan.value)
    if isinstance(applied, Err):
        return applied

    initializing = plan.value.init is not None
    message = INIT_COMMIT_MESSAGE if initializing else update_commit_message(metadata.version)
    committed = commit_changes(ctx, collaborators.vcs, message, console)
    if isinstance(committed, Err):
        return committed

    if initializing:
        console.success(f"initialized {ctx.identity.full_name} at {metadata.version}")
        return Ok(
            RunReport(
                outcome="initialized",
                version=metadata.version,
                version_code=metadata.version_code,
                committed=committed.value,
            )
        )

    if not committed.value:
        return Ok(
            RunReport(outcome="noop", version=metadata.version, version_code=metadata.version_code)
        )

    archive = collaborators.packager.package(exclude_lists(ctx))
    if isinstance(archive, Err):
        return archive
    console.print(f"packaged {archive.value.name}", Style.DIM)

    release = collaborators.publisher.publish(
        metadata.version,
        archive.value,
        prerelease=ctx.trigger.is_prerelease,
    )
    if isinstance(release, Err):
        return release

    kind = "pre-release" if ctx.trigger.is_prerelease else "release"
    console.success(f"published {kind} {metadata.version}: {release.value}")
    return Ok(
        RunReport(
            outcome="published",
            version=metadata.version,
            version_code=metadata.version_code,
            committed=True,
            archive=str(archive.value),
            release=release.value,
        )
    )
