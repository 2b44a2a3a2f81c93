"""Platform abstraction layer."""

from .detection import (
    PlatformProfile,
    detect_profile,
    normalize_arch,
    normalize_os,
)
from .files import atomic_install_file
from .process import (
    ProcessError,
    run,
    run_silent,
    which,
)
from .workdir import WorkDir, WorkDirInterrupted

__all__ = [
    # detection
    "PlatformProfile",
    "detect_profile",
    "normalize_arch",
    "normalize_os",
    # files
    "atomic_install_file",
    # process
    "ProcessError",
    "run",
    "run_silent",
    "which",
    # workdir
    "WorkDir",
    "WorkDirInterrupted",
]
