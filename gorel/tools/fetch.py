"""Download clients for release artifacts.

A ``Fetcher`` knows how to copy one URL to one local file. The installer
holds an ordered list of fetchers (``wget`` first, then ``curl``) and uses
the first one that is present and succeeds; see ``fetch_with_fallback``.

- Fetcher: protocol (injectable for tests)
- WgetFetcher / CurlFetcher: real clients driven through subprocess
- MockFetcher: serves predefined bytes per URL
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gorel.core.errors import DownloadUnavailable
from gorel.core.result import Err, Ok, Result
from gorel.platform.process import run, which

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gorel.output.console import ConsoleProtocol

__all__ = [
    "CurlFetcher",
    "FetchError",
    "Fetcher",
    "MockFetcher",
    "WgetFetcher",
    "default_fetchers",
    "fetch_with_fallback",
]


@dataclass(frozen=True, slots=True)
class FetchError:
    """A single client's failure to fetch a URL."""

    client: str
    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.client}: {self.message} ({self.url})"


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for a download client."""

    name: str

    def available(self) -> bool:
        """True if the client can be used on this host."""
        ...

    def fetch(self, url: str, dest: Path) -> Result[Path, FetchError]:
        """Download ``url`` into ``dest``."""
        ...


class _CommandFetcher:
    """Shared plumbing for fetchers backed by an external command."""

    name = ""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def available(self) -> bool:
        return which(self.name) is not None

    def command(self, url: str, dest: Path) -> list[str]:
        raise NotImplementedError

    def fetch(self, url: str, dest: Path) -> Result[Path, FetchError]:
        result = run(self.command(url, dest), cwd=dest.parent, timeout=self.timeout)
        if isinstance(result, Err):
            detail = result.error.stderr.strip() or str(result.error)
            return Err(FetchError(client=self.name, url=url, message=detail))
        return Ok(dest)


class WgetFetcher(_CommandFetcher):
    name = "wget"

    def command(self, url: str, dest: Path) -> list[str]:
        return ["wget", "-q", "-O", str(dest), url]


class CurlFetcher(_CommandFetcher):
    name = "curl"

    def command(self, url: str, dest: Path) -> list[str]:
        return ["curl", "-sSfL", url, "-o", str(dest)]


def default_fetchers(timeout: float | None = None) -> tuple[Fetcher, ...]:
    """Clients in preference order."""
    return (WgetFetcher(timeout), CurlFetcher(timeout))


def fetch_with_fallback(
    url: str,
    dest: Path,
    fetchers: Sequence[Fetcher],
    console: ConsoleProtocol,
) -> Result[Path, DownloadUnavailable]:
    """Download with the first fetcher that is available and succeeds.

    Each client is tried at most once. A failed attempt never leaves a
    partial file at ``dest``.
    """
    attempted: list[str] = []
    for fetcher in fetchers:
        if not fetcher.available():
            continue

        attempted.append(fetcher.name)
        console.log(f"Downloading via {fetcher.name}: {url}")
        result = fetcher.fetch(url, dest)
        if isinstance(result, Ok):
            return Ok(dest)

        dest.unlink(missing_ok=True)
        console.warn(f"{fetcher.name} failed to download file ({result.error.message})")

    return Err(DownloadUnavailable(url=url, attempted=tuple(attempted)))


class MockFetcher:
    """Fetcher serving predefined content, for tests.

    Usage:
        fetcher = MockFetcher("wget")
        fetcher.set_content("https://example.com/a.zip", b"...")
    """

    def __init__(self, name: str = "mock", *, is_available: bool = True) -> None:
        self.name = name
        self.is_available = is_available
        self._responses: dict[str, bytes] = {}
        self.calls: list[str] = []

    def set_content(self, url: str, content: bytes) -> None:
        self._responses[url] = content

    def available(self) -> bool:
        return self.is_available

    def fetch(self, url: str, dest: Path) -> Result[Path, FetchError]:
        self.calls.append(url)
        if url not in self._responses:
            return Err(FetchError(client=self.name, url=url, message="404 Not Found (mock)"))
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self._responses[url])
        return Ok(dest)
