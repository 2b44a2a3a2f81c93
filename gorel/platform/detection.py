"""Host platform detection for the installer.

The installer supports exactly two operating systems (Darwin and Linux) and
two architectures (``x86_64`` and ``i686``). Detection runs once per install
and produces an immutable ``PlatformProfile``; nothing downstream compares
raw ``uname`` strings again.

Windows binaries are released but not installable through this path.
"""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass

from gorel.core.errors import UnsupportedArchitecture, UnsupportedPlatform
from gorel.core.result import Err, Ok, Result
from gorel.core.targets import Arch, ArchiveFormat, OperatingSystem

__all__ = [
    "PlatformProfile",
    "INSTALLABLE_OSES",
    "detect_profile",
    "normalize_arch",
    "normalize_os",
]

INSTALLABLE_OSES: tuple[OperatingSystem, ...] = (OperatingSystem.DARWIN, OperatingSystem.LINUX)

# The following architectures match the cross-platform build matrix
# (GOARCH names), keyed by the `uname -m` spelling.
_MACHINE_TO_ARCH: dict[str, Arch] = {
    "x86_64": Arch.AMD64,
    "i686": Arch.X86,
}

_CHECKSUM_TOOL: dict[OperatingSystem, str] = {
    OperatingSystem.DARWIN: "shasum -a 256",
    OperatingSystem.LINUX: "sha256sum",
}


@dataclass(frozen=True, slots=True)
class PlatformProfile:
    """Everything the install pipeline needs to know about the host.

    Attributes:
        os: Detected operating system.
        arch: Detected architecture.
        target: ``<os>-<arch>`` naming the artifact to download. Equal to the
            detected pair unless the caller supplied an explicit target.
    """

    os: OperatingSystem
    arch: Arch
    target: str

    @property
    def archive_format(self) -> ArchiveFormat:
        return self.os.archive_format

    @property
    def checksum_tool(self) -> str:
        """Name of the native digest utility on this OS (SHA-256 either way)."""
        return _CHECKSUM_TOOL[self.os]

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def normalize_os(system: str) -> Result[OperatingSystem, UnsupportedPlatform]:
    """Map a ``uname -s`` value (``Darwin``, ``Linux``) to an OperatingSystem."""
    lowered = system.strip().lower()
    for candidate in INSTALLABLE_OSES:
        if candidate.value == lowered:
            return Ok(candidate)
    return Err(UnsupportedPlatform(system=system))


def normalize_arch(machine: str) -> Result[Arch, UnsupportedArchitecture]:
    """Map a ``uname -m`` value to an Arch.

    Only the raw machine spellings are accepted. Already-normalized names
    (``amd64``, ``386``) are rejected like any other unknown value.
    """
    arch = _MACHINE_TO_ARCH.get(machine.strip().lower())
    if arch is None:
        return Err(UnsupportedArchitecture(machine=machine))
    return Ok(arch)


def detect_profile(
    *,
    target: str | None = None,
    system: str | None = None,
    machine: str | None = None,
) -> Result[PlatformProfile, UnsupportedPlatform | UnsupportedArchitecture]:
    """Detect the host platform.

    Args:
        target: Explicit ``<os>-<arch>`` override. The archive format is
            still derived from the detected OS.
        system: ``uname -s`` value (probed from the host when None).
        machine: ``uname -m`` value (probed from the host when None).

    Returns:
        Ok(PlatformProfile), or Err when the OS or architecture is unknown.
    """
    system = _platform.system() if system is None else system
    machine = _platform.machine() if machine is None else machine

    os_result = normalize_os(system)
    if isinstance(os_result, Err):
        return os_result

    arch_result = normalize_arch(machine)
    if isinstance(arch_result, Err):
        return arch_result

    os_, arch = os_result.value, arch_result.value
    return Ok(PlatformProfile(os=os_, arch=arch, target=target or f"{os_}-{arch}"))
