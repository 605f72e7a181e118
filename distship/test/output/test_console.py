"""Tests for distship.output.console module."""

from __future__ import annotations

import pytest

from distship.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("npm dist-tag ls a", Style.DIM)
        assert console.outputs[0].message == "npm dist-tag ls a"
        assert console.outputs[0].style == Style.DIM

    def test_shorthands_prefix_messages(self) -> None:
        console = MockConsole()
        console.success("shipped")
        console.error("boom")
        console.info("Next release: Beta")
        assert console.messages == ["OK shipped", "error: boom", "info: Next release: Beta"]
        assert console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("Release delta: a@1.1.0 => a@1.2.0")
        console.print("other")
        assert len(console.find("Release delta")) == 1


class TestRichConsole:
    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("progress")
        console.error("bad [thing]")

        captured = capsys.readouterr()
        assert "progress" in captured.out
        assert "bad [thing]" in captured.err
        assert "bad" not in captured.out

    def test_package_specs_are_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().print("[ci-skip] @acme/core@1.2.0", Style.DIM)
        assert "[ci-skip] @acme/core@1.2.0" in capsys.readouterr().out
