from __future__ import annotations

from pathlib import Path

import pytest

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import ProcessError
from modrel.services.release import publisher as publisher_mod
from modrel.services.release.publisher import GhPublisher, release_command


class FakeGh:
    def __init__(self, response: Result[str, ProcessError]) -> None:
        self.response = response
        self.calls: list[list[str]] = []

    def __call__(
        self, cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        self.calls.append(cmd)
        return self.response


@pytest.fixture
def gh_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(publisher_mod.shutil, "which", lambda name: f"/usr/bin/{name}")


def test_release_command() -> None:
    cmd = release_command("v1.1", Path("install.zip"), prerelease=False)
    assert cmd == [
        "gh",
        "release",
        "create",
        "v1.1",
        "install.zip",
        "--title",
        "Release v1.1",
        "--notes",
        "",
    ]


def test_release_command_prerelease() -> None:
    assert release_command("v1.1", Path("install.zip"), prerelease=True)[-1] == "--prerelease"


@pytest.mark.usefixtures("gh_on_path")
class TestGhPublisher:
    def test_publish_returns_release_url(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = FakeGh(Ok("https://github.com/alice/mod/releases/tag/v1.1\n"))
        monkeypatch.setattr(publisher_mod, "run_process", fake)

        result = GhPublisher(root=tmp_path).publish("v1.1", tmp_path / "install.zip", prerelease=True)

        assert result == Ok("https://github.com/alice/mod/releases/tag/v1.1")
        assert fake.calls[0][:4] == ["gh", "release", "create", "v1.1"]
        assert "--prerelease" in fake.calls[0]

    def test_existing_tag_is_collision(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        error = ProcessError(
            command=("gh",),
            returncode=1,
            stdout="",
            stderr="HTTP 422: Validation Failed (tag_name already_exists)",
        )
        monkeypatch.setattr(publisher_mod, "run_process", FakeGh(Err(error)))

        result = GhPublisher(root=tmp_path).publish("v1.1", tmp_path / "install.zip", prerelease=False)

        assert isinstance(result, Err)
        assert result.error.kind == "publish_collision"

    def test_other_failure(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        error = ProcessError(command=("gh",), returncode=1, stdout="", stderr="HTTP 401: Bad credentials")
        monkeypatch.setattr(publisher_mod, "run_process", FakeGh(Err(error)))

        result = GhPublisher(root=tmp_path).publish("v1.1", tmp_path / "install.zip", prerelease=False)

        assert isinstance(result, Err)
        assert result.error.kind == "publish_failed"
        assert result.error.hint == "HTTP 401: Bad credentials"


def test_missing_gh(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(publisher_mod.shutil, "which", lambda name: None)
    fake = FakeGh(Ok(""))
    monkeypatch.setattr(publisher_mod, "run_process", fake)

    result = GhPublisher(root=tmp_path).publish("v1.1", tmp_path / "install.zip", prerelease=False)

    assert isinstance(result, Err)
    assert result.error.kind == "gh_missing"
    assert fake.calls == []
