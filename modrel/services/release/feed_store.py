"""Read and write the update-feed record (``update.json``)."""

from __future__ import annotations

import json
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.core.structured import as_str_dict
from modrel.platform.files import atomic_write_text, read_text_if_exists
from modrel.services.release.errors import ReleaseError
from modrel.services.release.model import FeedRecord

_MANAGED_KEYS = ("version", "versionCode", "zipUrl", "changelog")


def _invalid(message: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_feed", message=message))


def parse_feed(text: str) -> Result[FeedRecord, ReleaseError]:
    """Parse feed JSON. Missing fields read as "" (or 0 for versionCode)."""
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return _invalid(f"update feed is not valid JSON: {e}")

    data = as_str_dict(obj)
    if data is None:
        return _invalid("update feed must be a JSON object")

    strings: dict[str, str] = {}
    for key in ("version", "zipUrl", "changelog"):
        value = data.get(key, "")
        if not isinstance(value, str):
            return _invalid(f"{key} must be a string")
        strings[key] = value.strip()

    raw_code = data.get("versionCode", 0)
    if isinstance(raw_code, bool):
        return _invalid("versionCode must be an integer")
    if isinstance(raw_code, str) and raw_code.strip().isdigit():
        raw_code = int(raw_code.strip())
    if not isinstance(raw_code, int):
        return _invalid("versionCode must be an integer")

    return Ok(
        FeedRecord(
            version=strings["version"],
            version_code=raw_code,
            zip_url=strings["zipUrl"],
            changelog=strings["changelog"],
            extra=tuple((k, v) for k, v in data.items() if k not in _MANAGED_KEYS),
        )
    )


def render_feed(feed: FeedRecord) -> str:
    data: dict[str, object] = {
        "version": feed.version,
        "versionCode": feed.version_code,
        "zipUrl": feed.zip_url,
        "changelog": feed.changelog,
    }
    data.update(feed.extra)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def read_feed(path: Path) -> Result[FeedRecord | None, ReleaseError]:
    """Ok(None) when the file does not exist."""
    try:
        text = read_text_if_exists(path)
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot read {path.name}: {e}"))
    if text is None:
        return Ok(None)
    return parse_feed(text)


def write_feed(path: Path, feed: FeedRecord) -> Result[None, ReleaseError]:
    try:
        atomic_write_text(path, render_feed(feed))
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot write {path.name}: {e}"))
    return Ok(None)
