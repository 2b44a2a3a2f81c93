"""Tests for gorel.platform.detection module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from gorel.core.errors import UnsupportedArchitecture, UnsupportedPlatform
from gorel.core.result import Err, Ok
from gorel.core.targets import Arch, ArchiveFormat, OperatingSystem
from gorel.platform.detection import (
    PlatformProfile,
    detect_profile,
    normalize_arch,
    normalize_os,
)


class TestNormalizeOs:
    @pytest.mark.parametrize(
        ("system", "expected"),
        [
            ("Darwin", OperatingSystem.DARWIN),
            ("Linux", OperatingSystem.LINUX),
            ("LINUX", OperatingSystem.LINUX),
        ],
    )
    def test_supported(self, system: str, expected: OperatingSystem) -> None:
        assert normalize_os(system) == Ok(expected)

    @pytest.mark.parametrize("system", ["Windows", "FreeBSD", "CYGWIN_NT-10.0", ""])
    def test_unsupported(self, system: str) -> None:
        assert normalize_os(system) == Err(UnsupportedPlatform(system=system))


class TestNormalizeArch:
    def test_x86_64(self) -> None:
        assert normalize_arch("x86_64") == Ok(Arch.AMD64)

    def test_i686(self) -> None:
        assert normalize_arch("i686") == Ok(Arch.X86)

    @pytest.mark.parametrize("machine", ["armv7", "armv7l", "aarch64", "arm64", "i386"])
    def test_unsupported(self, machine: str) -> None:
        assert normalize_arch(machine) == Err(UnsupportedArchitecture(machine=machine))

    @pytest.mark.parametrize("already_normalized", ["amd64", "386"])
    def test_normalized_names_rejected_consistently(self, already_normalized: str) -> None:
        first = normalize_arch(already_normalized)
        second = normalize_arch(already_normalized)
        assert isinstance(first, Err)
        assert first == second


class TestPlatformProfile:
    def test_darwin(self) -> None:
        profile = PlatformProfile(OperatingSystem.DARWIN, Arch.AMD64, "darwin-amd64")
        assert profile.archive_format == ArchiveFormat.ZIP
        assert profile.checksum_tool == "shasum -a 256"

    def test_linux(self) -> None:
        profile = PlatformProfile(OperatingSystem.LINUX, Arch.X86, "linux-386")
        assert profile.archive_format == ArchiveFormat.TAR_GZ
        assert profile.checksum_tool == "sha256sum"
        assert str(profile) == "linux-386"

    def test_frozen(self) -> None:
        profile = PlatformProfile(OperatingSystem.LINUX, Arch.X86, "linux-386")
        with pytest.raises(AttributeError):
            profile.target = "darwin-amd64"  # type: ignore[misc]


class TestDetectProfile:
    @pytest.mark.parametrize(
        ("system", "machine", "target"),
        [
            ("Darwin", "x86_64", "darwin-amd64"),
            ("Linux", "x86_64", "linux-amd64"),
            ("Linux", "i686", "linux-386"),
        ],
    )
    def test_supported_pairs(self, system: str, machine: str, target: str) -> None:
        result = detect_profile(system=system, machine=machine)
        assert isinstance(result, Ok)
        assert result.value.target == target

    def test_explicit_target_keeps_detected_format(self) -> None:
        result = detect_profile(target="linux-amd64", system="Darwin", machine="x86_64")

        assert isinstance(result, Ok)
        assert result.value.target == "linux-amd64"
        assert result.value.archive_format == ArchiveFormat.ZIP

    def test_unknown_os_checked_before_arch(self) -> None:
        result = detect_profile(system="Windows", machine="armv7")
        assert result == Err(UnsupportedPlatform(system="Windows"))

    def test_unknown_arch(self) -> None:
        result = detect_profile(system="Linux", machine="armv7")
        assert result == Err(UnsupportedArchitecture(machine="armv7"))

    def test_probes_host(self) -> None:
        with (
            patch("gorel.platform.detection._platform.system", return_value="Linux"),
            patch("gorel.platform.detection._platform.machine", return_value="i686"),
        ):
            result = detect_profile()

        assert isinstance(result, Ok)
        assert result.value.os == OperatingSystem.LINUX
        assert result.value.arch == Arch.X86
