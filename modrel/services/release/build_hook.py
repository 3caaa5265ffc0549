from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import run_silent
from modrel.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class ScriptBuildHook:
    """Runs the repository's custom build script, if it has one.

    The script runs with the repository root as working directory and its
    output streams straight into the run log.
    """

    root: Path
    script: str = "common/build.sh"

    @property
    def script_path(self) -> Path:
        return self.root / self.script

    def run(self) -> Result[bool, ReleaseError]:
        if not self.script_path.is_file():
            return Ok(False)

        result = run_silent(["bash", str(self.script_path)], cwd=self.root)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"{self.script} failed (exit {result.error.returncode})",
                )
            )
        return Ok(True)
