"""Error presentation utilities.

Centralized error formatting and exit code mapping, so every pipeline
failure ends with exactly one prefixed warning line and a stable exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gorel.core.config import ConfigError
from gorel.core.errors import (
    ChecksumMismatch,
    CompileFailed,
    DownloadUnavailable,
    ExitCode,
    ExtractFailed,
    InstallError,
    InstallFailed,
    PackageFailed,
    ReleaseError,
    TagFailed,
    ToolMissing,
    UnknownArchiveFormat,
    UnsupportedArchitecture,
    UnsupportedPlatform,
    VersionMissing,
    WrongBranch,
)

if TYPE_CHECKING:
    from gorel.output.console import ConsoleProtocol

__all__ = [
    "describe_error",
    "error_exit_code",
    "print_error",
]


def describe_error(error: InstallError | ReleaseError | ConfigError) -> str:
    """Render an error as a single warning line."""
    match error:
        case UnsupportedPlatform(system=system):
            return f"unable to determine OS platform type: {system}"
        case UnsupportedArchitecture(machine=machine):
            return f"architecture not supported: {machine}"
        case DownloadUnavailable():
            return "Required: SSL-enabled 'curl' or 'wget' on PATH with network access"
        case ChecksumMismatch(archive=archive, reason=reason) if reason:
            return f"checksum verification failed for {archive.name}: {reason}"
        case ChecksumMismatch(archive=archive, expected=expected, actual=actual):
            return f"checksum mismatch for {archive.name}: expected {expected}, got {actual}"
        case UnknownArchiveFormat(extension=extension):
            return f"[extract] Unknown file extension: {extension}"
        case ExtractFailed(archive=archive, reason=reason):
            return f"failed to extract {archive.name}: {reason}"
        case InstallFailed(path=path, reason=reason):
            return f"failed to install {path}: {reason}"
        case WrongBranch(expected=expected, current=current):
            return (
                f"Releases must be generated from the '{expected}' branch "
                f"(current {current or 'detached HEAD'}); switch to it and try again."
            )
        case ToolMissing(tool_id=tool_id, hint=hint):
            return f"{tool_id}: missing (hint: {hint})"
        case VersionMissing(path=path, reason=reason):
            return f"unable to read release version from {path}: {reason}"
        case CompileFailed(returncode=rc, detail=detail):
            if detail:
                return f"cross-platform build failed (exit {rc}): {detail}"
            return f"cross-platform build failed (exit {rc})"
        case PackageFailed(path=path, reason=reason):
            return f"failed to package {path}: {reason}"
        case TagFailed(tag=tag, message=message):
            return f"failed to publish tag {tag}: {message}"
        case ConfigError(message=message):
            return message


def error_exit_code(error: InstallError | ReleaseError | ConfigError) -> int:
    """Get the process exit code for an error."""
    match error:
        case UnsupportedPlatform():
            return int(ExitCode.UNSUPPORTED_OS)
        case UnsupportedArchitecture():
            return int(ExitCode.UNSUPPORTED_PLATFORM)
        case UnknownArchiveFormat():
            return int(ExitCode.UNKNOWN_ARCHIVE_FORMAT)
        case DownloadUnavailable():
            return int(ExitCode.DOWNLOAD_UNAVAILABLE)
        case WrongBranch():
            return int(ExitCode.WRONG_BRANCH)
    return int(ExitCode.PIPELINE_FAILURE)


def print_error(error: InstallError | ReleaseError | ConfigError, console: ConsoleProtocol) -> None:
    console.warn(describe_error(error))
