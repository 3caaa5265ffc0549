"""Typed configuration loading and access.

The config file is optional: a repository without ``modrel.toml`` gets the
defaults below, which match the conventional module layout
(``module.prop``, ``update.json``, ``changelog.md``, ``install.zip``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "FilesConfig",
    "GitConfig",
    "ReleaseConfig",
    "load_config",
    "load_repo_config",
]

CONFIG_FILENAME = "modrel.toml"

DEFAULT_METADATA_FILE = "module.prop"
DEFAULT_FEED_FILE = "update.json"
DEFAULT_CHANGELOG_FILE = "changelog.md"
DEFAULT_README_FILE = "README.md"

DEFAULT_BRANCH = "master"
DEFAULT_ASSET = "install.zip"
DEFAULT_IGNORE_FILES = (".gitignore", ".zipignore")
DEFAULT_BUILD_SCRIPT = "common/build.sh"

DEFAULT_GIT_USER_NAME = "github-actions[bot]"
DEFAULT_GIT_USER_EMAIL = "github-actions[bot]@users.noreply.github.com"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FilesConfig:
    """Repository-relative paths of the managed files."""

    metadata: str = DEFAULT_METADATA_FILE
    feed: str = DEFAULT_FEED_FILE
    changelog: str = DEFAULT_CHANGELOG_FILE
    readme: str = DEFAULT_README_FILE


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    branch: str = DEFAULT_BRANCH
    asset: str = DEFAULT_ASSET
    # When false the version code is left as written in the metadata file.
    bump_version_code: bool = True
    push: bool = True
    ignore_files: tuple[str, ...] = DEFAULT_IGNORE_FILES
    build_script: str = DEFAULT_BUILD_SCRIPT


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Commit identity used for automated commits."""

    user_name: str = DEFAULT_GIT_USER_NAME
    user_email: str = DEFAULT_GIT_USER_EMAIL


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    files: FilesConfig = field(default_factory=FilesConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        files: StrDict = get_table(data, "files") or {}
        release: StrDict = get_table(data, "release") or {}
        git: StrDict = get_table(data, "git") or {}

        bump = get_bool(release, "bump_version_code")
        push = get_bool(release, "push")
        ignore_files = get_str_list(release, "ignore_files")

        return cls(
            files=FilesConfig(
                metadata=get_str(files, "metadata") or DEFAULT_METADATA_FILE,
                feed=get_str(files, "feed") or DEFAULT_FEED_FILE,
                changelog=get_str(files, "changelog") or DEFAULT_CHANGELOG_FILE,
                readme=get_str(files, "readme") or DEFAULT_README_FILE,
            ),
            release=ReleaseConfig(
                branch=get_str(release, "branch") or DEFAULT_BRANCH,
                asset=get_str(release, "asset") or DEFAULT_ASSET,
                bump_version_code=True if bump is None else bump,
                push=True if push is None else push,
                ignore_files=(
                    DEFAULT_IGNORE_FILES if ignore_files is None else tuple(ignore_files)
                ),
                build_script=get_str(release, "build_script") or DEFAULT_BUILD_SCRIPT,
            ),
            git=GitConfig(
                user_name=get_str(git, "user_name") or DEFAULT_GIT_USER_NAME,
                user_email=get_str(git, "user_email") or DEFAULT_GIT_USER_EMAIL,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Config.from_dict(result.value))


def load_repo_config(root: Path) -> Result[Config, ConfigError]:
    """Load ``modrel.toml`` from a repository root, or defaults if absent."""
    path = root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
