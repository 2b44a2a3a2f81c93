"""Install and release pipelines."""

from .install import InstallContext, InstallOptions, InstallService
from .release import ArchiveDescriptor, ReleaseContext, ReleaseService, read_version

__all__ = [
    # install
    "InstallContext",
    "InstallOptions",
    "InstallService",
    # release
    "ArchiveDescriptor",
    "ReleaseContext",
    "ReleaseService",
    "read_version",
]
