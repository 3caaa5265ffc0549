"""Read and write the module metadata file (``module.prop``).

The file is a list of ``key=value`` lines. Parsing tolerates whitespace
around keys and values, blank lines and ``#`` comments; a missing key reads
as an empty string. Rewriting keeps unknown keys, comments and the line
order intact and only touches the lines whose value changed.
"""

from __future__ import annotations

from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.files import atomic_write_text, read_text_if_exists
from modrel.services.release.errors import ReleaseError
from modrel.services.release.model import ModuleMetadata

# File key -> ModuleMetadata attribute, in canonical file order.
METADATA_KEYS: tuple[tuple[str, str], ...] = (
    ("id", "id"),
    ("name", "name"),
    ("version", "version"),
    ("versionCode", "version_code"),
    ("author", "author"),
    ("description", "description"),
    ("updateJson", "update_json"),
)


def _split_line(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    key, value = stripped.split("=", 1)
    return (key.strip(), value.strip())


def _raw_values(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        kv = _split_line(line)
        if kv is None:
            continue
        key, value = kv
        # First occurrence wins.
        values.setdefault(key, value)
    return values


def parse_metadata(text: str) -> ModuleMetadata:
    """Parse metadata text; never fails.

    A ``versionCode`` that is not an integer reads as 0 and is kept in
    ``raw_version_code``, so template files (``versionCode={{VERSION_CODE}}``)
    can still be detected and initialized.
    """
    values = _raw_values(text)

    code_text = values.get("versionCode", "")
    raw_version_code: str | None = None
    try:
        version_code = int(code_text) if code_text else 0
    except ValueError:
        version_code = 0
        raw_version_code = code_text

    return ModuleMetadata(
        id=values.get("id", ""),
        name=values.get("name", ""),
        version=values.get("version", ""),
        version_code=version_code,
        author=values.get("author", ""),
        description=values.get("description", ""),
        update_json=values.get("updateJson", ""),
        raw_version_code=raw_version_code,
    )


def _field_text(metadata: ModuleMetadata, attr: str) -> str:
    return str(getattr(metadata, attr))


def render_metadata(metadata: ModuleMetadata, original: str | None = None) -> str:
    """Render ``metadata`` as file text, editing ``original`` in place if given."""
    wanted = {key: _field_text(metadata, attr) for key, attr in METADATA_KEYS}
    out: list[str] = []
    seen: set[str] = set()

    for line in (original or "").splitlines():
        kv = _split_line(line)
        if kv is None or kv[0] not in wanted or kv[0] in seen:
            out.append(line)
            continue
        key, value = kv
        seen.add(key)
        out.append(line if value == wanted[key] else f"{key}={wanted[key]}")

    for key, _ in METADATA_KEYS:
        if key in seen:
            continue
        # An absent key reads as "", so there is nothing to add for it.
        if key != "versionCode" and wanted[key] == "":
            continue
        out.append(f"{key}={wanted[key]}")

    return "\n".join(out) + "\n"


def read_metadata(path: Path) -> Result[ModuleMetadata | None, ReleaseError]:
    """Ok(None) when the file does not exist."""
    try:
        text = read_text_if_exists(path)
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot read {path.name}: {e}"))
    if text is None:
        return Ok(None)
    return Ok(parse_metadata(text))


def write_metadata(path: Path, metadata: ModuleMetadata) -> Result[bool, ReleaseError]:
    """Persist ``metadata``; Ok(False) when the file already holds it."""
    try:
        original = read_text_if_exists(path)
        if original is not None and parse_metadata(original) == metadata:
            return Ok(False)
        atomic_write_text(path, render_metadata(metadata, original))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot write {path.name}: {e}"))
    return Ok(True)
