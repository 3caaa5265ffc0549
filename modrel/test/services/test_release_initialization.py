from __future__ import annotations

from datetime import date

import pytest

from modrel.services.release.identity import RepositoryIdentity
from modrel.services.release.initialization import (
    initial_changelog,
    initial_readme,
    initialize,
    is_initialized,
)
from modrel.services.release.model import ModuleMetadata

IDENTITY = RepositoryIdentity(owner="alice", slug="my-cool-module")
DAY = date(2026, 10, 17)


class TestIsInitialized:
    def test_missing_metadata(self) -> None:
        assert is_initialized(None, IDENTITY) is False

    def test_id_matches(self) -> None:
        assert is_initialized(ModuleMetadata(id="my-cool-module", name="Other"), IDENTITY)

    def test_name_matches(self) -> None:
        assert is_initialized(ModuleMetadata(id="other", name="My Cool Module"), IDENTITY)

    def test_both_match(self) -> None:
        meta = ModuleMetadata(id="my-cool-module", name="My Cool Module")
        assert is_initialized(meta, IDENTITY)

    def test_neither_matches(self) -> None:
        assert not is_initialized(ModuleMetadata(id="template", name="Template"), IDENTITY)

    def test_blank_fields_never_match(self) -> None:
        assert not is_initialized(ModuleMetadata(), IDENTITY)
        blank_identity = RepositoryIdentity(owner="alice", slug="")
        assert not is_initialized(ModuleMetadata(), blank_identity)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert is_initialized(ModuleMetadata(id="  my-cool-module "), IDENTITY)


class TestInitialize:
    def test_metadata(self) -> None:
        bundle = initialize(IDENTITY, today=DAY)
        assert bundle.metadata == ModuleMetadata(
            id="my-cool-module",
            name="My Cool Module",
            version="v0.1.0",
            version_code=1,
            author="alice",
            description="My Cool Module",
            update_json=IDENTITY.feed_url,
        )

    def test_feed(self) -> None:
        feed = initialize(IDENTITY, today=DAY).feed
        assert feed.version == "v0.1.0"
        assert feed.version_code == 1
        assert feed.zip_url == IDENTITY.zip_url("v0.1.0")
        assert feed.changelog == IDENTITY.changelog_url

    def test_result_is_recognized_as_initialized(self) -> None:
        assert is_initialized(initialize(IDENTITY, today=DAY).metadata, IDENTITY)

    def test_changelog_entry(self) -> None:
        assert initialize(IDENTITY, today=DAY).changelog == (
            "### v0.1.0 - 2026.10.17\n* Initial release\n"
        )


class TestChangelog:
    def test_prepends_to_existing(self) -> None:
        text = initial_changelog(DAY, "### older notes\n* stuff\n")
        assert text.startswith("### v0.1.0 - 2026.10.17\n* Initial release\n\n")
        assert text.endswith("### older notes\n* stuff\n")

    def test_does_not_duplicate_entry(self) -> None:
        once = initial_changelog(DAY)
        assert initial_changelog(DAY, once) == once

    @pytest.mark.parametrize("existing", [None, "", "  \n"])
    def test_empty_existing(self, existing: str | None) -> None:
        assert initial_changelog(DAY, existing) == "### v0.1.0 - 2026.10.17\n* Initial release\n"


class TestReadme:
    def test_synthesized_when_missing(self) -> None:
        assert initial_readme(IDENTITY) == "# My Cool Module\n"

    def test_placeholders_substituted(self) -> None:
        text = initial_readme(IDENTITY, "# {{NAME}}\nInstall {{ID}}, then {{ID}} again.\n")
        assert text == "# My Cool Module\nInstall my-cool-module, then my-cool-module again.\n"

    def test_without_placeholders_unchanged(self) -> None:
        assert initial_readme(IDENTITY, "# Hand written\n") == "# Hand written\n"
