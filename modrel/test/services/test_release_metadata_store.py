from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from modrel.core.result import Ok
from modrel.services.release.metadata_store import (
    parse_metadata,
    read_metadata,
    render_metadata,
    write_metadata,
)
from modrel.services.release.model import ModuleMetadata

PROP = """id=my-module
name=My Module
version=v1.1
versionCode=7
author=alice
description=My Module
updateJson=https://raw.githubusercontent.com/alice/my-module/master/update.json
"""


def test_parse_all_fields() -> None:
    assert parse_metadata(PROP) == ModuleMetadata(
        id="my-module",
        name="My Module",
        version="v1.1",
        version_code=7,
        author="alice",
        description="My Module",
        update_json="https://raw.githubusercontent.com/alice/my-module/master/update.json",
    )


def test_parse_tolerates_whitespace_comments_and_missing_keys() -> None:
    meta = parse_metadata("# module\n\n  id =  my-module  \nversion= v2\r\n")
    assert meta.id == "my-module"
    assert meta.version == "v2"
    assert meta.name == ""
    assert meta.version_code == 0


def test_parse_keeps_equals_in_value() -> None:
    assert parse_metadata("description=a=b\n").description == "a=b"


def test_parse_first_occurrence_wins() -> None:
    assert parse_metadata("version=v1\nversion=v2\n").version == "v1"


def test_parse_keeps_non_integer_version_code_as_text() -> None:
    meta = parse_metadata("id={{ID}}\nversionCode={{VERSION_CODE}}\n")
    assert meta.id == "{{ID}}"
    assert meta.version_code == 0
    assert meta.raw_version_code == "{{VERSION_CODE}}"


def test_parse_integer_version_code_has_no_raw_text() -> None:
    assert parse_metadata("versionCode=-5\n").raw_version_code is None
    assert parse_metadata("versionCode=-5\n").version_code == -5


def test_render_from_scratch_uses_canonical_order() -> None:
    meta = parse_metadata(PROP)
    assert render_metadata(meta) == PROP


def test_render_edits_in_place_and_keeps_unknown_lines() -> None:
    original = "# header\nid=my-module\nminMagisk=20400\nversionCode=7\nversion = v1.1\n"
    meta = ModuleMetadata(id="my-module", version="v1.1", version_code=42)

    rendered = render_metadata(meta, original)

    assert rendered == "# header\nid=my-module\nminMagisk=20400\nversionCode=42\nversion = v1.1\n"


def test_render_appends_missing_non_empty_keys() -> None:
    meta = ModuleMetadata(id="x", author="alice", version_code=3)
    assert render_metadata(meta, "id=x\n") == "id=x\nversionCode=3\nauthor=alice\n"


def test_read_missing_file(tmp_path: Path) -> None:
    assert read_metadata(tmp_path / "module.prop") == Ok(None)


def test_write_skips_identical_content(tmp_path: Path) -> None:
    path = tmp_path / "module.prop"
    text = "id = my-module\nversionCode=7\n"
    path.write_text(text, encoding="utf-8")
    meta = read_metadata(path).unwrap()
    assert meta is not None

    assert write_metadata(path, meta) == Ok(False)
    assert path.read_text(encoding="utf-8") == text


def test_write_updates_changed_field(tmp_path: Path) -> None:
    path = tmp_path / "module.prop"
    path.write_text(PROP, encoding="utf-8")
    meta = read_metadata(path).unwrap()
    assert meta is not None

    assert write_metadata(path, replace(meta, version_code=42)) == Ok(True)
    assert "versionCode=42\n" in path.read_text(encoding="utf-8")
    assert read_metadata(path) == Ok(replace(meta, version_code=42))


def test_write_replaces_template_version_code(tmp_path: Path) -> None:
    path = tmp_path / "module.prop"
    path.write_text("id=my-module\nversionCode={{VERSION_CODE}}\n", encoding="utf-8")
    meta = read_metadata(path).unwrap()
    assert meta is not None

    assert write_metadata(path, replace(meta, version_code=3, raw_version_code=None)) == Ok(True)
    assert path.read_text(encoding="utf-8") == "id=my-module\nversionCode=3\n"
