"""Release target model shared by the release and install pipelines.

Both sides must agree on artifact names, so the naming rules live here:

    <binary>-<os>-<arch>[.exe]            raw binary produced by the compiler
    <binary>-<os>-<arch>[.exe].<ext>      archive uploaded to the release
    <archive>.sha256sum                   sidecar checksum file
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Arch",
    "ArchiveFormat",
    "OperatingSystem",
    "ReleaseTarget",
    "RELEASE_ARCHES",
    "RELEASE_OSES",
    "SIDECAR_SUFFIX",
    "release_targets",
]

SIDECAR_SUFFIX = ".sha256sum"


class ArchiveFormat(Enum):
    """Compression format of a release archive."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return self.value


class OperatingSystem(Enum):
    """Operating systems in the cross-compile matrix (Go GOOS names)."""

    DARWIN = "darwin"
    LINUX = "linux"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == OperatingSystem.WINDOWS else ""

    @property
    def archive_format(self) -> ArchiveFormat:
        """Linux ships tarballs, everything else ships zip files."""
        return ArchiveFormat.TAR_GZ if self == OperatingSystem.LINUX else ArchiveFormat.ZIP


class Arch(Enum):
    """CPU architectures in the cross-compile matrix (Go GOARCH names)."""

    AMD64 = "amd64"
    X86 = "386"

    def __str__(self) -> str:
        return self.value


RELEASE_OSES: tuple[OperatingSystem, ...] = (
    OperatingSystem.DARWIN,
    OperatingSystem.WINDOWS,
    OperatingSystem.LINUX,
)
RELEASE_ARCHES: tuple[Arch, ...] = (Arch.X86, Arch.AMD64)


@dataclass(frozen=True, slots=True)
class ReleaseTarget:
    """One cell of the OS x architecture build matrix."""

    os: OperatingSystem
    arch: Arch
    binary: str

    @property
    def identifier(self) -> str:
        """The ``<os>-<arch>`` string used in URLs and the ``-t`` flag."""
        return f"{self.os}-{self.arch}"

    @property
    def artifact_name(self) -> str:
        return f"{self.binary}-{self.identifier}{self.os.exe_suffix}"

    @property
    def archive_format(self) -> ArchiveFormat:
        return self.os.archive_format

    @property
    def archive_name(self) -> str:
        return f"{self.artifact_name}.{self.archive_format.extension}"

    @property
    def sidecar_name(self) -> str:
        return f"{self.archive_name}{SIDECAR_SUFFIX}"

    def __str__(self) -> str:
        return self.artifact_name


def release_targets(binary: str) -> tuple[ReleaseTarget, ...]:
    """Return the fixed six-entry release matrix for ``binary``."""
    return tuple(
        ReleaseTarget(os=os_, arch=arch, binary=binary)
        for os_ in RELEASE_OSES
        for arch in RELEASE_ARCHES
    )
