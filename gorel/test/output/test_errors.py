"""Tests for gorel.output.errors module."""

from __future__ import annotations

from pathlib import Path

import pytest

from gorel.core.config import ConfigError
from gorel.core.errors import (
    ChecksumMismatch,
    CompileFailed,
    DownloadUnavailable,
    ExitCode,
    ExtractFailed,
    InstallFailed,
    PackageFailed,
    TagFailed,
    ToolMissing,
    UnknownArchiveFormat,
    UnsupportedArchitecture,
    UnsupportedPlatform,
    VersionMissing,
    WrongBranch,
)
from gorel.output.console import MockConsole
from gorel.output.errors import describe_error, error_exit_code, print_error


class TestExitCodes:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (UnsupportedPlatform("FreeBSD"), 2),
            (UnsupportedArchitecture("armv7l"), 3),
            (UnknownArchiveFormat("rar"), 4),
            (DownloadUnavailable("https://x/y.zip"), 6),
            (ChecksumMismatch(Path("a.zip"), "00", "11"), 99),
            (ExtractFailed(Path("a.zip"), "bad"), 99),
            (InstallFailed(Path("/usr/local/bin/cli"), "denied"), 99),
            (WrongBranch("master", "feature"), 127),
            (ToolMissing("go", "install go"), 99),
            (VersionMissing(Path("VERSION"), "file not found"), 99),
            (CompileFailed(2), 99),
            (PackageFailed(Path("bin/x"), "missing"), 99),
            (TagFailed("v1.0.0", "exists"), 99),
            (ConfigError("bad toml"), 99),
        ],
    )
    def test_mapping(self, error: object, code: int) -> None:
        assert error_exit_code(error) == code  # type: ignore[arg-type]

    def test_exit_code_values_are_stable(self) -> None:
        assert int(ExitCode.INVALID_OPTION) == 1
        assert int(ExitCode.DOWNLOAD_UNAVAILABLE) == 6
        assert int(ExitCode.PIPELINE_FAILURE) == 99
        assert int(ExitCode.WRONG_BRANCH) == 127


class TestDescribeError:
    def test_every_error_is_single_line(self) -> None:
        errors = [
            UnsupportedPlatform("FreeBSD"),
            UnsupportedArchitecture("armv7l"),
            DownloadUnavailable("https://x/y.zip"),
            ChecksumMismatch(Path("a.zip"), "00", "11"),
            UnknownArchiveFormat("rar"),
            ExtractFailed(Path("a.zip"), "bad"),
            InstallFailed(Path("/usr/local/bin/cli"), "denied"),
            WrongBranch("master", "feature"),
            ToolMissing("go", "install go"),
            VersionMissing(Path("VERSION"), "file not found"),
            CompileFailed(2, "syntax error"),
            PackageFailed(Path("bin/x"), "missing"),
            TagFailed("v1.0.0", "exists"),
            ConfigError("bad toml"),
        ]
        for error in errors:
            assert "\n" not in describe_error(error)

    def test_checksum_mismatch_shows_digests(self) -> None:
        line = describe_error(ChecksumMismatch(Path("/tmp/a.zip"), "aa", "bb"))
        assert "a.zip" in line
        assert "expected aa, got bb" in line

    def test_checksum_reason_wins(self) -> None:
        line = describe_error(ChecksumMismatch(Path("a.zip"), "", "", reason="unreadable"))
        assert "unreadable" in line

    def test_wrong_branch(self) -> None:
        line = describe_error(WrongBranch("master", "feature"))
        assert "'master'" in line
        assert "(current feature)" in line

    def test_print_error_warns(self) -> None:
        console = MockConsole(purpose="install")
        print_error(UnsupportedArchitecture("armv7l"), console)
        assert console.messages == ["xxx install: architecture not supported: armv7l"]

    def test_wrong_branch_prints_one_warning(self) -> None:
        console = MockConsole(purpose="release")
        print_error(WrongBranch("master", None), console)
        assert len(console.messages) == 1
        assert "detached HEAD" in console.messages[0]
