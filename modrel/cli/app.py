from __future__ import annotations

from pathlib import Path

import typer

from modrel import __version__
from modrel.cli.context import build_context, fail
from modrel.cli.step_outputs import write_step_outputs
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.output.console import Style
from modrel.services.release.pipeline import exclude_lists, load_state, plan_release, run_release

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_ROOT_OPTION = typer.Option(Path("."), "--root", help="Module repository root")
_REPO_OPTION = typer.Option(
    None, "--repo", help="owner/name (default: $GITHUB_REPOSITORY, then origin remote)"
)


def release_error_code(kind: str) -> ErrorCode:
    if kind == "downgrade":
        return ErrorCode.VERSION_ERROR
    if kind in {"publish_collision", "publish_failed"}:
        return ErrorCode.PUBLISH_ERROR
    if kind in {"gh_missing", "invalid_identity"}:
        return ErrorCode.ENV_ERROR
    if kind in {"invalid_metadata", "invalid_feed"}:
        return ErrorCode.USER_ERROR
    return ErrorCode.IO_ERROR


@app.command()
def run(
    root: Path = _ROOT_OPTION,
    repo: str | None = _REPO_OPTION,
    event: str | None = typer.Option(
        None, "--event", help="push|manual (default: from $GITHUB_EVENT_NAME)"
    ),
    changed: list[str] = typer.Option(
        [], "--changed", help="Path changed by the triggering push (repeatable)"
    ),
) -> None:
    """Initialize, reconcile, commit, package and publish."""
    ctx = build_context(root=root, repo=repo, event=event, changed=changed)
    console = ctx.console

    result = run_release(ctx.release, ctx.collaborators(), console)
    if isinstance(result, Err):
        console.error(result.error.pretty())
        raise typer.Exit(code=int(release_error_code(result.error.kind)))

    report = result.value
    write_step_outputs(report)
    console.print(f"outcome: {report.outcome}", Style.BOLD)


@app.command()
def plan(
    root: Path = _ROOT_OPTION,
    repo: str | None = _REPO_OPTION,
) -> None:
    """Show what a run would do, without writing anything."""
    ctx = build_context(root=root, repo=repo)
    console = ctx.console

    state = load_state(ctx.release)
    if isinstance(state, Err):
        fail(state.error.pretty(), code=release_error_code(state.error.kind))

    result = plan_release(ctx.release, state.value, ctx.repository, console)
    if isinstance(result, Err):
        console.error(result.error.pretty())
        raise typer.Exit(code=int(release_error_code(result.error.kind)))

    release_plan = result.value
    metadata = release_plan.metadata
    if release_plan.init is not None:
        console.print(f"would initialize at {metadata.version}", Style.BOLD)
        return

    rec = release_plan.reconciliation
    assert rec is not None
    console.print(f"version: {metadata.version}", Style.BOLD)
    console.print(f"versionCode: {metadata.version_code}", Style.BOLD)
    console.print(f"metadata changes: {'yes' if rec.metadata_changed else 'no'}")
    console.print(f"feed changes: {'yes' if rec.feed_changed else 'no'}")


@app.command()
def package(
    root: Path = _ROOT_OPTION,
    repo: str | None = _REPO_OPTION,
) -> None:
    """Build the release archive from the working tree."""
    ctx = build_context(root=root, repo=repo)
    result = ctx.collaborators().packager.package(exclude_lists(ctx.release))
    if isinstance(result, Err):
        fail(result.error.pretty(), code=release_error_code(result.error.kind))
    ctx.console.success(str(result.value))


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    del version


def main() -> None:
    app()
