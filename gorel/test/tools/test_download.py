"""Tests for tools/download.py - URL resolution and artifact download."""

from __future__ import annotations

from pathlib import Path

from gorel.core.errors import DownloadUnavailable
from gorel.core.result import Err, Ok
from gorel.core.targets import ArchiveFormat
from gorel.output.console import MockConsole
from gorel.tools.download import DownloadRequest, download_artifacts
from gorel.tools.fetch import MockFetcher

BASE = "https://github.com/afiune/go-release/releases"


def _request(version: str = "latest", target: str = "linux-amd64") -> DownloadRequest:
    fmt = ArchiveFormat.TAR_GZ if "linux" in target else ArchiveFormat.ZIP
    return DownloadRequest(
        releases_url=BASE, binary="cli", target=target, archive_format=fmt, version=version
    )


class TestDownloadRequest:
    def test_latest_urls(self) -> None:
        request = _request()
        assert request.archive_url == f"{BASE}/latest/download/cli-linux-amd64.tar.gz"
        assert request.sidecar_url == f"{BASE}/latest/download/cli-linux-amd64.tar.gz.sha256sum"

    def test_pinned_version_url(self) -> None:
        request = _request(version="1.2.3", target="darwin-amd64")
        assert request.archive_url == f"{BASE}/download/1.2.3/cli-darwin-amd64.zip"
        assert request.sidecar_url == request.archive_url + ".sha256sum"

    def test_trailing_slash_in_base(self) -> None:
        request = DownloadRequest(
            releases_url=BASE + "/",
            binary="cli",
            target="linux-386",
            archive_format=ArchiveFormat.TAR_GZ,
        )
        assert request.archive_url == f"{BASE}/latest/download/cli-linux-386.tar.gz"

    def test_canonical_names(self) -> None:
        request = _request()
        assert request.archive_name == "cli-linux-amd64.tar.gz"
        assert request.sidecar_name == "cli-linux-amd64.tar.gz.sha256sum"


class TestDownloadArtifacts:
    def test_renames_into_workdir(self, tmp_path: Path) -> None:
        request = _request()
        fetcher = MockFetcher("wget")
        fetcher.set_content(request.archive_url, b"archive")
        fetcher.set_content(request.sidecar_url, b"sidecar")

        result = download_artifacts(request, tmp_path, [fetcher], MockConsole())

        assert isinstance(result, Ok)
        assert result.value.archive == tmp_path / "cli-linux-amd64.tar.gz"
        assert result.value.sidecar == tmp_path / "cli-linux-amd64.tar.gz.sha256sum"
        assert result.value.archive.read_bytes() == b"archive"
        assert list((tmp_path / "staging").iterdir()) == []

    def test_archive_missing(self, tmp_path: Path) -> None:
        request = _request()

        result = download_artifacts(request, tmp_path, [MockFetcher("wget")], MockConsole())

        assert result == Err(DownloadUnavailable(url=request.archive_url, attempted=("wget",)))
        assert not (tmp_path / request.archive_name).exists()

    def test_sidecar_missing_leaves_no_archive(self, tmp_path: Path) -> None:
        request = _request()
        fetcher = MockFetcher("wget")
        fetcher.set_content(request.archive_url, b"archive")

        result = download_artifacts(request, tmp_path, [fetcher], MockConsole())

        assert isinstance(result, Err)
        assert result.error.url == request.sidecar_url
        assert not (tmp_path / request.archive_name).exists()
        assert list((tmp_path / "staging").iterdir()) == []

    def test_fallback_applies_per_file(self, tmp_path: Path) -> None:
        request = _request()
        wget, curl = MockFetcher("wget"), MockFetcher("curl")
        wget.set_content(request.archive_url, b"archive")
        curl.set_content(request.sidecar_url, b"sidecar")

        result = download_artifacts(request, tmp_path, [wget, curl], MockConsole())

        assert isinstance(result, Ok)
        assert curl.calls == [request.sidecar_url]
