"""GitHub Actions step outputs (``$GITHUB_OUTPUT``)."""

from __future__ import annotations

import os
from pathlib import Path

from modrel.services.release.model import RunReport


def report_outputs(report: RunReport) -> dict[str, str]:
    return {
        "outcome": report.outcome,
        "version": report.version or "",
        "version_code": "" if report.version_code is None else str(report.version_code),
        "release": report.release or "",
    }


def write_step_outputs(report: RunReport, *, path: Path | None = None) -> bool:
    """Append the report to the step output file; False outside Actions."""
    if path is None:
        env = os.environ.get("GITHUB_OUTPUT")
        if not env:
            return False
        path = Path(env)

    lines = [f"{key}={value}\n" for key, value in report_outputs(report).items()]
    with path.open("a", encoding="utf-8") as handle:
        handle.writelines(lines)
    return True
