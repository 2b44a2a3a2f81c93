"""Release URL resolution and artifact download.

Remote layout (GitHub releases):

    {releases}/latest/download/{binary}-{target}.{ext}
    {releases}/download/{version}/{binary}-{target}.{ext}

Each archive has a ``.sha256sum`` sidecar at the same URL plus the suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from gorel.core.errors import DownloadUnavailable
from gorel.core.result import Err, Ok, Result
from gorel.core.targets import SIDECAR_SUFFIX, ArchiveFormat
from gorel.tools.fetch import fetch_with_fallback

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gorel.output.console import ConsoleProtocol
    from gorel.tools.fetch import Fetcher

__all__ = ["LATEST", "DownloadRequest", "DownloadedArtifacts", "download_artifacts"]

LATEST = "latest"


@dataclass(frozen=True, slots=True)
class DownloadRequest:
    """What to download: a version of the binary built for a target."""

    releases_url: str
    binary: str
    target: str
    archive_format: ArchiveFormat
    version: str = LATEST

    @property
    def archive_name(self) -> str:
        return f"{self.binary}-{self.target}.{self.archive_format.extension}"

    @property
    def sidecar_name(self) -> str:
        return f"{self.archive_name}{SIDECAR_SUFFIX}"

    @property
    def archive_url(self) -> str:
        base = self.releases_url.rstrip("/")
        if self.version == LATEST:
            return f"{base}/latest/download/{self.archive_name}"
        return f"{base}/download/{self.version}/{self.archive_name}"

    @property
    def sidecar_url(self) -> str:
        return f"{self.archive_url}{SIDECAR_SUFFIX}"


@dataclass(frozen=True, slots=True)
class DownloadedArtifacts:
    archive: Path
    sidecar: Path


def download_artifacts(
    request: DownloadRequest,
    workdir: Path,
    fetchers: Sequence[Fetcher],
    console: ConsoleProtocol,
) -> Result[DownloadedArtifacts, DownloadUnavailable]:
    """Fetch the archive and its sidecar into ``workdir``.

    Both files are staged under version-based names in ``workdir/staging``
    and only renamed to their canonical names in ``workdir`` once both
    downloads have succeeded.
    """
    staging = workdir / "staging"
    staging.mkdir(parents=True, exist_ok=True)
    staged_archive = (
        staging / f"{request.binary}-{request.version}.{request.archive_format.extension}"
    )
    staged_sidecar = staged_archive.with_name(f"{staged_archive.name}{SIDECAR_SUFFIX}")

    archive_result = fetch_with_fallback(request.archive_url, staged_archive, fetchers, console)
    if isinstance(archive_result, Err):
        return archive_result

    sidecar_result = fetch_with_fallback(request.sidecar_url, staged_sidecar, fetchers, console)
    if isinstance(sidecar_result, Err):
        staged_archive.unlink(missing_ok=True)
        return sidecar_result

    archive = staged_archive.replace(workdir / request.archive_name)
    sidecar = staged_sidecar.replace(workdir / request.sidecar_name)
    return Ok(DownloadedArtifacts(archive=archive, sidecar=sidecar))
