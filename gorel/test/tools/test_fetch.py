"""Tests for tools/fetch.py - download clients and fallback."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from gorel.core.errors import DownloadUnavailable
from gorel.core.result import Err, Ok
from gorel.output.console import MockConsole
from gorel.platform.process import ProcessError
from gorel.tools.fetch import (
    CurlFetcher,
    FetchError,
    Fetcher,
    MockFetcher,
    WgetFetcher,
    default_fetchers,
    fetch_with_fallback,
)

URL = "https://github.com/afiune/go-release/releases/latest/download/cli-linux-amd64.tar.gz"


class TestFetchError:
    def test_str(self) -> None:
        error = FetchError(client="curl", url="https://x/a.zip", message="404")
        assert str(error) == "curl: 404 (https://x/a.zip)"


class TestCommandFetchers:
    def test_wget_command(self, tmp_path: Path) -> None:
        dest = tmp_path / "a.tar.gz"
        assert WgetFetcher().command(URL, dest) == ["wget", "-q", "-O", str(dest), URL]

    def test_curl_command(self, tmp_path: Path) -> None:
        dest = tmp_path / "a.tar.gz"
        assert CurlFetcher().command(URL, dest) == ["curl", "-sSfL", URL, "-o", str(dest)]

    def test_default_order(self) -> None:
        assert [f.name for f in default_fetchers()] == ["wget", "curl"]

    def test_satisfies_protocol(self) -> None:
        assert isinstance(WgetFetcher(), Fetcher)
        assert isinstance(MockFetcher(), Fetcher)

    def test_available_uses_path_lookup(self) -> None:
        with patch("gorel.tools.fetch.which", return_value=None):
            assert CurlFetcher().available() is False
        with patch("gorel.tools.fetch.which", return_value="/usr/bin/curl"):
            assert CurlFetcher().available() is True

    def test_fetch_maps_process_error(self, tmp_path: Path) -> None:
        failure = Err(
            ProcessError(command=("curl",), returncode=22, stdout="", stderr="404 Not Found\n")
        )
        with patch("gorel.tools.fetch.run", return_value=failure):
            result = CurlFetcher().fetch(URL, tmp_path / "a.tar.gz")

        assert result == Err(FetchError(client="curl", url=URL, message="404 Not Found"))

    def test_fetch_success(self, tmp_path: Path) -> None:
        dest = tmp_path / "a.tar.gz"
        with patch("gorel.tools.fetch.run", return_value=Ok("")) as mock_run:
            result = WgetFetcher(timeout=5.0).fetch(URL, dest)

        assert result == Ok(dest)
        assert mock_run.call_args.kwargs["timeout"] == 5.0


class TestFetchWithFallback:
    def test_primary_succeeds(self, tmp_path: Path) -> None:
        primary, secondary = MockFetcher("wget"), MockFetcher("curl")
        primary.set_content(URL, b"data")
        console = MockConsole(purpose="install")

        result = fetch_with_fallback(URL, tmp_path / "a", [primary, secondary], console)

        assert result == Ok(tmp_path / "a")
        assert (tmp_path / "a").read_bytes() == b"data"
        assert secondary.calls == []
        assert f"--> install: Downloading via wget: {URL}" in console.messages

    def test_falls_back_to_secondary(self, tmp_path: Path) -> None:
        primary, secondary = MockFetcher("wget"), MockFetcher("curl")
        secondary.set_content(URL, b"data")
        console = MockConsole(purpose="install")

        result = fetch_with_fallback(URL, tmp_path / "a", [primary, secondary], console)

        assert isinstance(result, Ok)
        assert primary.calls == [URL]
        assert secondary.calls == [URL]
        assert console.find("wget failed to download file")

    def test_skips_unavailable_client(self, tmp_path: Path) -> None:
        primary = MockFetcher("wget", is_available=False)
        secondary = MockFetcher("curl")
        secondary.set_content(URL, b"data")

        result = fetch_with_fallback(URL, tmp_path / "a", [primary, secondary], MockConsole())

        assert isinstance(result, Ok)
        assert primary.calls == []

    def test_both_fail(self, tmp_path: Path) -> None:
        primary, secondary = MockFetcher("wget"), MockFetcher("curl")

        result = fetch_with_fallback(URL, tmp_path / "a", [primary, secondary], MockConsole())

        assert result == Err(DownloadUnavailable(url=URL, attempted=("wget", "curl")))
        assert not (tmp_path / "a").exists()

    def test_no_client_available(self, tmp_path: Path) -> None:
        result = fetch_with_fallback(
            URL, tmp_path / "a", [MockFetcher("wget", is_available=False)], MockConsole()
        )
        assert result == Err(DownloadUnavailable(url=URL, attempted=()))

    def test_each_client_tried_once(self, tmp_path: Path) -> None:
        primary, secondary = MockFetcher("wget"), MockFetcher("curl")

        fetch_with_fallback(URL, tmp_path / "a", [primary, secondary], MockConsole())

        assert len(primary.calls) == 1
        assert len(secondary.calls) == 1
