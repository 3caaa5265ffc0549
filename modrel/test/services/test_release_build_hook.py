from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from modrel.core.result import Err, Ok
from modrel.services.release.build_hook import ScriptBuildHook


def test_no_script_is_not_an_error(tmp_path: Path) -> None:
    assert ScriptBuildHook(root=tmp_path).run() == Ok(False)


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
class TestScript:
    def _script(self, root: Path, body: str) -> None:
        script = root / "common" / "build.sh"
        script.parent.mkdir()
        script.write_text(body, encoding="utf-8")

    def test_runs_in_repository_root(self, tmp_path: Path) -> None:
        self._script(tmp_path, "echo built > out.txt\n")

        assert ScriptBuildHook(root=tmp_path).run() == Ok(True)
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "built\n"

    def test_failure(self, tmp_path: Path) -> None:
        self._script(tmp_path, "exit 3\n")

        result = ScriptBuildHook(root=tmp_path).run()

        assert isinstance(result, Err)
        assert result.error.kind == "build_failed"
        assert "exit 3" in result.error.message
