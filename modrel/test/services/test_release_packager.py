from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from modrel.core.result import Ok
from modrel.services.release.packager import ZipPackager, collect_files, is_excluded, read_patterns


def _tree(root: Path, files: dict[str, str]) -> None:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


def _names(archive: Path) -> list[str]:
    with zipfile.ZipFile(archive) as zf:
        return zf.namelist()


class TestPatterns:
    def test_read_skips_comments_blanks_and_missing_files(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("# build output\n\n/out/\n*.log\n", encoding="utf-8")

        patterns = read_patterns([tmp_path / ".gitignore", tmp_path / ".zipignore"])

        assert patterns == ["out/", "*.log"]

    @pytest.mark.parametrize(
        ("rel", "patterns", "excluded"),
        [
            ("debug.log", ["*.log"], True),
            ("logs/debug.log", ["*.log"], True),
            ("out/bin/a", ["out/"], True),
            ("out", ["out/"], False),
            ("docs/readme.md", ["docs"], True),
            ("system/bin/tool", ["*.log"], False),
            ("README.md", ["README.md"], True),
        ],
    )
    def test_is_excluded(self, rel: str, patterns: list[str], excluded: bool) -> None:
        assert is_excluded(rel, patterns) is excluded

    def test_collect_always_skips_git_dir(self, tmp_path: Path) -> None:
        _tree(tmp_path, {".git/HEAD": "ref", "module.prop": "id=x\n"})
        assert [arc for _, arc in collect_files(tmp_path, [])] == ["module.prop"]


class TestZipPackager:
    def test_package_honours_ignore_lists(self, tmp_path: Path) -> None:
        _tree(
            tmp_path,
            {
                ".gitignore": "*.log\n",
                ".zipignore": ".github/\nREADME.md\n",
                ".github/workflows/release.yml": "on: push\n",
                "README.md": "# Mod\n",
                "build.log": "noise",
                "module.prop": "id=mod\n",
                "system/bin/tool": "#!/bin/sh\n",
                ".git/config": "[core]\n",
            },
        )

        result = ZipPackager(root=tmp_path).package(
            [tmp_path / ".gitignore", tmp_path / ".zipignore"]
        )

        assert result == Ok(tmp_path / "install.zip")
        assert _names(tmp_path / "install.zip") == [
            ".gitignore",
            ".zipignore",
            "module.prop",
            "system/bin/tool",
        ]

    def test_archive_never_contains_itself(self, tmp_path: Path) -> None:
        _tree(tmp_path, {"module.prop": "id=mod\n"})
        packager = ZipPackager(root=tmp_path)

        packager.package([])
        packager.package([])

        assert _names(tmp_path / "install.zip") == ["module.prop"]

    def test_same_tree_same_members(self, tmp_path: Path) -> None:
        _tree(tmp_path, {"b.txt": "b", "a/z.txt": "z", "a/a.txt": "a"})
        packager = ZipPackager(root=tmp_path, asset="module.zip")

        first = _names(packager.package([]).unwrap())
        second = _names(packager.package([]).unwrap())

        assert first == second == ["a/a.txt", "a/z.txt", "b.txt"]
