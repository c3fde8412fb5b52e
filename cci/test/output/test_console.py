"""Tests for cci.output.console module."""

from __future__ import annotations

import pytest

from cci.output.console import MockConsole, RichConsole, Style


class TestStyle:
    def test_str(self) -> None:
        assert str(Style.STEP) == "step"


class TestMockConsole:
    def test_records_with_prefixes(self) -> None:
        console = MockConsole()

        console.step("golangci-lint")
        console.command("golangci-lint run -c .golangci.yml")
        console.success("done")
        console.warning("careful")
        console.print("plain")

        assert console.messages == [
            "--- golangci-lint",
            "$ golangci-lint run -c .golangci.yml",
            "OK done",
            "warning: careful",
            "plain",
        ]
        assert not console.has_error()

    def test_error(self) -> None:
        console = MockConsole()
        console.error("boom")

        assert console.has_error()
        assert console.outputs[0].style == Style.ERROR
        assert console.text == "error: boom"

    def test_find(self) -> None:
        console = MockConsole()
        console.print("building coder")
        console.print("packaging coder")

        assert len(console.find("coder")) == 2
        assert console.find("nothing") == []


class TestRichConsole:
    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()

        console.step("building")
        console.error("tar: [boom]")

        captured = capsys.readouterr()
        assert "--- building" in captured.out
        assert "tar: [boom]" in captured.err
        assert "boom" not in captured.out
