"""Tests for modrel.output.console module."""

from __future__ import annotations

import pytest

from modrel.output.console import (
    ActionsConsole,
    MockConsole,
    RichConsole,
    Style,
    default_console,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    def test_captures_styles(self) -> None:
        console = MockConsole()
        console.print("plain")
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")

        assert console.messages == [
            "plain",
            "OK done",
            "error: broken",
            "warning: careful",
            "info: fyi",
        ]
        assert console.has_error()
        assert console.has_warning()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("version v1.0")
        console.print("other")
        assert [o.message for o in console.find("v1.0")] == ["version v1.0"]


class TestActionsConsole:
    def test_annotations(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = ActionsConsole()
        console.info("already initialized")
        console.warning("re-initializing")
        console.error("Downgrade detected!")
        console.print("plain [not markup]")

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "::notice::already initialized",
            "::warning::re-initializing",
            "::error::Downgrade detected!",
            "plain [not markup]",
        ]

    def test_multiline_messages_are_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().error("line one\nline two 100%")
        assert capsys.readouterr().out.strip() == "::error::line one%0Aline two 100%25"


class TestDefaultConsole:
    def test_actions(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        assert isinstance(default_console(), ActionsConsole)

    def test_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        assert isinstance(default_console(), RichConsole)
