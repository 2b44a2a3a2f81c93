"""Tests for gorel.output.console module."""

from __future__ import annotations

import pytest

from gorel.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_log_prefix(self) -> None:
        console = MockConsole(purpose="install")
        console.log("Extracting cli-linux-amd64.tar.gz")
        assert console.messages == ["--> install: Extracting cli-linux-amd64.tar.gz"]

    def test_warn_prefix(self) -> None:
        console = MockConsole(purpose="release")
        console.warn("Installing 'gox' command")
        assert console.messages == ["xxx release: Installing 'gox' command"]
        assert console.has_warning()

    def test_success(self) -> None:
        console = MockConsole(purpose="install")
        console.success("done")
        assert console.has_success()
        assert not console.has_warning()

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.print("alpha", Style.DIM)
        console.print("beta")
        assert len(console.find("alp")) == 1
        console.clear()
        assert console.text == ""


class TestRichConsole:
    def test_log_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(purpose="install")
        console.log("hello [not markup]")

        captured = capsys.readouterr()
        assert "--> install: hello [not markup]" in captured.out
        assert captured.err == ""

    def test_warn_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(purpose="install")
        console.warn("wget failed to download file")

        captured = capsys.readouterr()
        assert "xxx install: wget failed to download file" in captured.err
        assert captured.out == ""
