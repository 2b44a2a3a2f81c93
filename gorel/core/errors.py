"""Exit codes and error payloads for the install and release pipelines.

Each failure kind is a small frozen dataclass. Stages return them inside
``Err`` and the CLI layer turns them into a warning line and an exit code
(see ``gorel.output.errors``). The numeric exit codes are part of the
public contract of the installer script and must remain stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "ExitCode",
    # install
    "UnsupportedPlatform",
    "UnsupportedArchitecture",
    "DownloadUnavailable",
    "ChecksumMismatch",
    "UnknownArchiveFormat",
    "ExtractFailed",
    "InstallFailed",
    "InstallError",
    # release
    "WrongBranch",
    "ToolMissing",
    "VersionMissing",
    "CompileFailed",
    "PackageFailed",
    "TagFailed",
    "ReleaseError",
]


class ExitCode(IntEnum):
    """Process exit codes.

    - 0: success
    - 1: invalid command-line usage
    - 2: host operating system not supported
    - 3: host OS or architecture not supported
    - 4: archive format not handled by the extractor
    - 6: neither download client could fetch the artifact
    - 99: any other pipeline failure
    - 127: release attempted from the wrong branch
    """

    OK = 0
    INVALID_OPTION = 1
    UNSUPPORTED_OS = 2
    UNSUPPORTED_PLATFORM = 3
    UNKNOWN_ARCHIVE_FORMAT = 4
    DOWNLOAD_UNAVAILABLE = 6
    PIPELINE_FAILURE = 99
    WRONG_BRANCH = 127

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


# -----------------------------------------------------------------------------
# Install pipeline
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    system: str


@dataclass(frozen=True, slots=True)
class UnsupportedArchitecture:
    machine: str


@dataclass(frozen=True, slots=True)
class DownloadUnavailable:
    url: str
    attempted: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ChecksumMismatch:
    archive: Path
    expected: str
    actual: str
    reason: str = ""


@dataclass(frozen=True, slots=True)
class UnknownArchiveFormat:
    extension: str


@dataclass(frozen=True, slots=True)
class ExtractFailed:
    archive: Path
    reason: str


@dataclass(frozen=True, slots=True)
class InstallFailed:
    path: Path
    reason: str


InstallError = (
    UnsupportedPlatform
    | UnsupportedArchitecture
    | DownloadUnavailable
    | ChecksumMismatch
    | UnknownArchiveFormat
    | ExtractFailed
    | InstallFailed
)


# -----------------------------------------------------------------------------
# Release pipeline
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WrongBranch:
    expected: str
    current: str | None


@dataclass(frozen=True, slots=True)
class ToolMissing:
    tool_id: str
    hint: str


@dataclass(frozen=True, slots=True)
class VersionMissing:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class CompileFailed:
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class PackageFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class TagFailed:
    tag: str
    message: str


ReleaseError = (
    WrongBranch
    | ToolMissing
    | VersionMissing
    | CompileFailed
    | PackageFailed
    | TagFailed
)
