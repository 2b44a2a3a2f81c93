"""Installer pipeline.

Stages run strictly in order and the first failure aborts the run:

    platform detection -> download (archive + sidecar) -> checksum
    verification -> extraction -> binary install

A frozen ``InstallContext`` is threaded from stage to stage; each stage
returns an updated copy. All intermediate files live in a ``WorkDir`` that
is removed on every exit path. The post-install ``<binary> version`` smoke
test only warns on failure; the binary is already in place by then.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from gorel.core.config import Config
from gorel.core.errors import (
    InstallError,
    InstallFailed,
    UnsupportedArchitecture,
    UnsupportedPlatform,
)
from gorel.core.result import Err, Ok, Result
from gorel.output.console import ConsoleProtocol, Style
from gorel.platform.detection import PlatformProfile, detect_profile
from gorel.platform.files import atomic_install_file
from gorel.platform.process import ProcessError, run
from gorel.platform.workdir import WorkDir
from gorel.tools.checksum import verify_archive
from gorel.tools.download import LATEST, DownloadedArtifacts, DownloadRequest, download_artifacts
from gorel.tools.extract import extract_archive
from gorel.tools.fetch import Fetcher, default_fetchers

__all__ = ["InstallContext", "InstallOptions", "InstallService"]

_SMOKE_TEST_TIMEOUT_SECONDS = 30.0

type DetectResult = Result[PlatformProfile, UnsupportedPlatform | UnsupportedArchitecture]
type Detector = Callable[[str | None], DetectResult]
type Runner = Callable[..., Result[str, ProcessError]]


def _detect_host(target: str | None) -> DetectResult:
    return detect_profile(target=target)


@dataclass(frozen=True, slots=True)
class InstallOptions:
    """User choices from the command line."""

    install_dir: Path
    version: str = LATEST
    target: str | None = None


@dataclass(frozen=True, slots=True)
class InstallContext:
    """State accumulated by the pipeline stages."""

    options: InstallOptions
    workdir: Path
    profile: PlatformProfile | None = None
    request: DownloadRequest | None = None
    artifacts: DownloadedArtifacts | None = None
    extracted_dir: Path | None = None
    installed: Path | None = None


class InstallService:
    """Download, verify and install one release of the configured binary."""

    def __init__(
        self,
        *,
        config: Config,
        console: ConsoleProtocol,
        fetchers: Sequence[Fetcher] | None = None,
        detector: Detector = _detect_host,
        runner: Runner = run,
        scratch_root: Path | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._fetchers = tuple(fetchers) if fetchers is not None else default_fetchers()
        self._detect = detector
        self._run = runner
        self._scratch_root = scratch_root

    @property
    def binary(self) -> str:
        return self._config.project.binary

    def install(self, options: InstallOptions) -> Result[Path, InstallError]:
        """Run the whole pipeline and return the installed binary path."""
        self._console.log(f"Installing the '{self.binary}' tool")

        with WorkDir(prefix=f"{self.binary}.", root=self._scratch_root) as workdir:
            ctx = InstallContext(options=options, workdir=workdir.path)
            result = (
                self._check_platform(ctx)
                .flat_map(self._download)
                .flat_map(self._verify)
                .flat_map(self._extract)
                .flat_map(self._install_binary)
            )
            if isinstance(result, Err):
                return result
            installed = result.value.installed
            assert installed is not None

        self._print_version(installed)
        self._console.success(f"The '{self.binary}' tool has been successfully installed.")
        return Ok(installed)

    def _check_platform(self, ctx: InstallContext) -> Result[InstallContext, InstallError]:
        result = self._detect(ctx.options.target)
        if isinstance(result, Err):
            return result
        profile = result.value
        self._console.print(f"platform: {profile} (target {profile.target})", Style.DIM)
        return Ok(replace(ctx, profile=profile))

    def _download(self, ctx: InstallContext) -> Result[InstallContext, InstallError]:
        assert ctx.profile is not None
        request = DownloadRequest(
            releases_url=self._config.project.releases_url,
            binary=self.binary,
            target=ctx.profile.target,
            archive_format=ctx.profile.archive_format,
            version=ctx.options.version,
        )
        result = download_artifacts(request, ctx.workdir, self._fetchers, self._console)
        if isinstance(result, Err):
            return result
        return Ok(replace(ctx, request=request, artifacts=result.value))

    def _verify(self, ctx: InstallContext) -> Result[InstallContext, InstallError]:
        assert ctx.profile is not None and ctx.artifacts is not None
        self._console.log(
            f"Verifying the shasum digest matches the downloaded archive "
            f"({ctx.profile.checksum_tool})"
        )
        result = verify_archive(ctx.artifacts.archive, ctx.artifacts.sidecar)
        if isinstance(result, Err):
            return result
        self._console.print(f"{ctx.artifacts.archive.name}: OK", Style.DIM)
        return Ok(ctx)

    def _extract(self, ctx: InstallContext) -> Result[InstallContext, InstallError]:
        assert ctx.profile is not None and ctx.artifacts is not None
        self._console.log(f"Extracting {ctx.artifacts.archive.name}")
        result = extract_archive(ctx.artifacts.archive, ctx.profile.archive_format)
        if isinstance(result, Err):
            return result
        return Ok(replace(ctx, extracted_dir=result.value))

    def _install_binary(self, ctx: InstallContext) -> Result[InstallContext, InstallError]:
        assert ctx.profile is not None and ctx.extracted_dir is not None
        install_dir = ctx.options.install_dir.expanduser().resolve()
        self._console.log(f"Installing {self.binary} into {install_dir}")

        source = ctx.extracted_dir / f"{self.binary}-{ctx.profile.target}"
        dest = install_dir / self.binary
        if not source.is_file():
            return Err(InstallFailed(path=dest, reason=f"{source.name} not found in archive"))

        try:
            atomic_install_file(source, dest)
        except OSError as e:
            return Err(InstallFailed(path=dest, reason=str(e)))

        self._console.print(f"'{source.name}' -> '{dest}'", Style.DIM)
        return Ok(replace(ctx, installed=dest))

    def _print_version(self, installed: Path) -> None:
        self._console.log(f"Verifying installed {self.binary} version")
        result = self._run(
            [str(installed), "version"],
            cwd=installed.parent,
            timeout=_SMOKE_TEST_TIMEOUT_SECONDS,
        )
        match result:
            case Ok(stdout):
                if stdout.strip():
                    self._console.print(stdout.strip())
            case Err(e):
                self._console.warn(f"'{self.binary} version' failed after install: {e}")
