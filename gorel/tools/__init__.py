"""Artifact handling: download clients, checksums and archive extraction."""

from .checksum import parse_sidecar, sha256_file, verify_archive, write_sidecar
from .download import LATEST, DownloadedArtifacts, DownloadRequest, download_artifacts
from .extract import archive_stem, extract_archive
from .fetch import (
    CurlFetcher,
    FetchError,
    Fetcher,
    MockFetcher,
    WgetFetcher,
    default_fetchers,
    fetch_with_fallback,
)

__all__ = [
    # checksum
    "parse_sidecar",
    "sha256_file",
    "verify_archive",
    "write_sidecar",
    # download
    "LATEST",
    "DownloadRequest",
    "DownloadedArtifacts",
    "download_artifacts",
    # extract
    "archive_stem",
    "extract_archive",
    # fetch
    "CurlFetcher",
    "FetchError",
    "Fetcher",
    "MockFetcher",
    "WgetFetcher",
    "default_fetchers",
    "fetch_with_fallback",
]
