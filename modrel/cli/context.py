from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import NoReturn

import typer

from modrel.core.config import Config, load_repo_config
from modrel.core.errors import ErrorCode
from modrel.core.result import Err
from modrel.git.repository import Repository
from modrel.output.console import ConsoleProtocol, default_console
from modrel.services.release.build_hook import ScriptBuildHook
from modrel.services.release.identity import (
    RepositoryIdentity,
    full_name_from_remote,
    parse_full_name,
)
from modrel.services.release.model import Trigger, TriggerEvent
from modrel.services.release.packager import ZipPackager
from modrel.services.release.pipeline import Collaborators, ReleaseContext
from modrel.services.release.publisher import GhPublisher

MANUAL_EVENTS = {"workflow_dispatch"}


@dataclass(frozen=True, slots=True)
class CLIContext:
    release: ReleaseContext
    repository: Repository
    console: ConsoleProtocol

    def collaborators(self) -> Collaborators:
        root = self.release.root
        config = self.release.config
        return Collaborators(
            vcs=self.repository,
            packager=ZipPackager(root=root, asset=config.release.asset),
            publisher=GhPublisher(root=root),
            build=ScriptBuildHook(root=root, script=config.release.build_script),
        )


def fail(message: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=int(code))


def resolve_event(event: str | None) -> TriggerEvent:
    if event is None:
        github_event = os.environ.get("GITHUB_EVENT_NAME", "")
        return "manual" if github_event in MANUAL_EVENTS else "push"
    if event not in ("push", "manual"):
        fail(f"invalid --event (expected push|manual): {event}", code=ErrorCode.USER_ERROR)
    return "manual" if event == "manual" else "push"


def resolve_full_name(repo: str | None, repository: Repository) -> str:
    if repo:
        return repo
    env = os.environ.get("GITHUB_REPOSITORY")
    if env:
        return env
    url = repository.remote_url()
    name = full_name_from_remote(url) if url else None
    if name is None:
        fail(
            "cannot determine repository (owner/name)",
            code=ErrorCode.ENV_ERROR,
        )
    return name


def build_identity(full_name: str, config: Config) -> RepositoryIdentity:
    parsed = parse_full_name(full_name)
    if isinstance(parsed, Err):
        fail(parsed.error.pretty(), code=ErrorCode.USER_ERROR)
    owner, slug = parsed.value
    return RepositoryIdentity(
        owner=owner,
        slug=slug,
        branch=config.release.branch,
        feed_file=config.files.feed,
        changelog_file=config.files.changelog,
        asset=config.release.asset,
    )


def build_context(
    *,
    root: Path,
    repo: str | None = None,
    event: str | None = None,
    changed: list[str] | None = None,
) -> CLIContext:
    root = root.expanduser().resolve()
    if not root.is_dir():
        fail(f"not a directory: {root}", code=ErrorCode.USER_ERROR)

    config_result = load_repo_config(root)
    if isinstance(config_result, Err):
        fail(config_result.error.message, code=ErrorCode.USER_ERROR)
    config = config_result.value

    repository = Repository(root)
    identity = build_identity(resolve_full_name(repo, repository), config)
    trigger = Trigger(
        event=resolve_event(event),
        changed_paths=tuple(changed) if changed else None,
    )

    return CLIContext(
        release=ReleaseContext(
            root=root,
            config=config,
            identity=identity,
            trigger=trigger,
            today=date.today(),
        ),
        repository=repository,
        console=default_console(),
    )
