"""Build the distributable archive from the working tree.

Exclusions come from ignore-list files (``.gitignore``, ``.zipignore``) that
exist at the repository root. Each non-comment line is a shell wildcard
matched against the repository-relative POSIX path, where ``*`` also spans
``/``. A pattern ending in ``/`` names a directory, and any pattern that
matches a directory excludes everything below it. ``.git`` and the archive
itself are never packaged.

Members are added in sorted path order, so the same file set always yields
the same archive membership.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from modrel.core.result import Err, Ok, Result
from modrel.services.release.errors import ReleaseError

_ALWAYS_EXCLUDED_DIRS = (".git",)


def read_patterns(exclude_lists: Sequence[Path]) -> list[str]:
    """Collect wildcard patterns from the ignore-list files that exist."""
    patterns: list[str] = []
    for path in exclude_lists:
        if not path.is_file():
            continue
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line.lstrip("/"))
    return patterns


def _parents(rel: str) -> Iterable[str]:
    parts = rel.split("/")
    for i in range(1, len(parts)):
        yield "/".join(parts[:i])


def is_excluded(rel: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        if pattern.endswith("/"):
            dir_pattern = pattern.rstrip("/")
            if any(fnmatchcase(p, dir_pattern) for p in _parents(rel)):
                return True
            continue
        if fnmatchcase(rel, pattern):
            return True
        if any(fnmatchcase(p, pattern) for p in _parents(rel)):
            return True
    return False


def collect_files(root: Path, patterns: Sequence[str], *, skip: Sequence[str] = ()) -> list[tuple[Path, str]]:
    """``(path, arcname)`` pairs of every file to package, sorted by arcname."""
    out: list[tuple[Path, str]] = []
    for p in sorted(root.rglob("*")):
        if p.is_dir():
            continue
        rel = p.relative_to(root).as_posix()
        if rel in skip:
            continue
        if rel.split("/", 1)[0] in _ALWAYS_EXCLUDED_DIRS:
            continue
        if is_excluded(rel, patterns):
            continue
        out.append((p, rel))
    out.sort(key=lambda item: item[1])
    return out


@dataclass(frozen=True, slots=True)
class ZipPackager:
    root: Path
    asset: str = "install.zip"

    @property
    def archive_path(self) -> Path:
        return self.root / self.asset

    def package(self, exclude_lists: Sequence[Path]) -> Result[Path, ReleaseError]:
        archive = self.archive_path
        try:
            patterns = read_patterns(exclude_lists)
            files = collect_files(self.root, patterns, skip=(self.asset,))
            archive.unlink(missing_ok=True)
            # Checkouts may carry mtimes before 1980, which ZIP cannot store.
            with ZipFile(archive, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
                for src, arc in files:
                    zf.write(src, arcname=arc)
        except (OSError, UnicodeDecodeError) as e:
            return Err(
                ReleaseError(kind="package_failed", message=f"failed to build {self.asset}: {e}")
            )
        return Ok(archive)
