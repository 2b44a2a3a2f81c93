"""Release pipeline.

Refuses to run off the release branch, then builds the six-target matrix
with the compile-matrix tool (``gox``), compresses each binary (tar.gz for
linux, zip otherwise) and deletes the raw binary, writes a ``.sha256sum``
sidecar per archive, then creates and pushes an annotated ``v<VERSION>`` tag.
Every stage is fatal on failure.
"""

from __future__ import annotations

import shutil
import tarfile
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from gorel.core.config import Config
from gorel.core.errors import (
    CompileFailed,
    PackageFailed,
    ReleaseError,
    TagFailed,
    ToolMissing,
    VersionMissing,
    WrongBranch,
)
from gorel.core.result import Err, Ok, Result
from gorel.core.targets import (
    Arch,
    ArchiveFormat,
    OperatingSystem,
    ReleaseTarget,
    release_targets,
)
from gorel.git.repository import Repository
from gorel.output.console import ConsoleProtocol, Style
from gorel.platform.process import ProcessError, run, run_silent, which
from gorel.tools.checksum import write_sidecar

__all__ = ["ArchiveDescriptor", "ReleaseContext", "ReleaseService", "read_version"]

type SilentRunner = Callable[..., Result[None, ProcessError]]
type Runner = Callable[..., Result[str, ProcessError]]

# Flag order handed to the compile-matrix tool
_COMPILE_OSES = (OperatingSystem.DARWIN, OperatingSystem.LINUX, OperatingSystem.WINDOWS)
_COMPILE_ARCHES = (Arch.AMD64, Arch.X86)


@dataclass(frozen=True, slots=True)
class ArchiveDescriptor:
    """A compressed release artifact and the target it was built for."""

    target: ReleaseTarget
    path: Path

    @property
    def archive_format(self) -> ArchiveFormat:
        return self.target.archive_format


def _empty_archives() -> tuple[ArchiveDescriptor, ...]:
    return ()


def _empty_paths() -> tuple[Path, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    version: str
    targets: tuple[ReleaseTarget, ...]
    compile_tool: str = ""
    archives: tuple[ArchiveDescriptor, ...] = field(default_factory=_empty_archives)
    sidecars: tuple[Path, ...] = field(default_factory=_empty_paths)

    @property
    def tag(self) -> str:
        return f"v{self.version}"


def read_version(path: Path) -> Result[str, VersionMissing]:
    """Read the release version (``0.1.0``) from the version file."""
    try:
        version = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return Err(VersionMissing(path=path, reason="file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(VersionMissing(path=path, reason=str(e)))
    if not version:
        return Err(VersionMissing(path=path, reason="file is empty"))
    return Ok(version.removeprefix("v"))


class ReleaseService:
    """Prepare a release from the git checkout at ``root``."""

    def __init__(
        self,
        *,
        root: Path,
        config: Config,
        console: ConsoleProtocol,
        repo: Repository | None = None,
        runner: Runner = run,
        silent_runner: SilentRunner = run_silent,
        locate: Callable[[str], str | None] = which,
    ) -> None:
        self._root = root
        self._config = config
        self._console = console
        self._repo = repo or Repository(root)
        self._run = runner
        self._run_silent = silent_runner
        self._which = locate

    @property
    def output_dir(self) -> Path:
        return self._root / self._config.release.output_dir

    def release(self) -> Result[ReleaseContext, ReleaseError]:
        branch_result = self._check_branch()
        if isinstance(branch_result, Err):
            return branch_result

        version_result = read_version(self._root / self._config.release.version_file)
        if isinstance(version_result, Err):
            return version_result

        ctx = ReleaseContext(
            version=version_result.value,
            targets=release_targets(self._config.project.binary),
        )
        self._console.log(f"Preparing release {ctx.tag}")

        result = (
            self._prerequisites(ctx)
            .flat_map(self._build_cross_platform)
            .flat_map(self._compress_targets)
            .flat_map(self._generate_shasums)
            .flat_map(self._create_git_tag)
        )
        return result

    def _check_branch(self) -> Result[None, WrongBranch]:
        expected = self._config.release.branch
        current = self._repo.current_branch()
        if current != expected:
            return Err(WrongBranch(expected=expected, current=current))
        return Ok(None)

    def _prerequisites(self, ctx: ReleaseContext) -> Result[ReleaseContext, ReleaseError]:
        tool = self._config.release.compile_tool
        located = self._which(tool)
        if located is None:
            self._console.warn(f"Installing '{tool}' command")
            result = self._install_compile_tool()
            if isinstance(result, Err):
                return result
            located = result.value
        return Ok(replace(ctx, compile_tool=located))

    def _install_compile_tool(self) -> Result[str, ReleaseError]:
        tool = self._config.release.compile_tool
        package = self._config.release.compile_tool_package
        hint = f"Install Go, then run: go install {package}"

        if self._which("go") is None:
            return Err(ToolMissing(tool_id="go", hint=hint))

        installed = self._run_silent(["go", "install", package], cwd=self._root)
        if isinstance(installed, Err):
            return Err(ToolMissing(tool_id=tool, hint=hint))

        located = self._which(tool)
        if located is not None:
            return Ok(located)

        # `go install` drops binaries in $GOPATH/bin, which may not be on PATH
        gopath = self._run(["go", "env", "GOPATH"], cwd=self._root)
        if isinstance(gopath, Ok) and gopath.value.strip():
            candidate = Path(gopath.value.strip()) / "bin" / tool
            if candidate.is_file():
                return Ok(str(candidate))
        return Err(ToolMissing(tool_id=tool, hint="add $(go env GOPATH)/bin to PATH"))

    def _clean_cache(self) -> None:
        self._console.log(f"Cleaning cache {self._config.release.output_dir}/ directory")
        out = self.output_dir
        if out.is_dir():
            for entry in out.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        out.mkdir(parents=True, exist_ok=True)

    def compile_command(self, ctx: ReleaseContext) -> list[str]:
        binary = self._config.project.binary
        out = self._config.release.output_dir
        return [
            ctx.compile_tool or self._config.release.compile_tool,
            f"-output={out}/{binary}-{{{{.OS}}}}-{{{{.Arch}}}}",
            f"-os={' '.join(str(o) for o in _COMPILE_OSES)}",
            f"-arch={' '.join(str(a) for a in _COMPILE_ARCHES)}",
            self._config.project.module,
        ]

    def _build_cross_platform(self, ctx: ReleaseContext) -> Result[ReleaseContext, ReleaseError]:
        try:
            self._clean_cache()
        except OSError as e:
            return Err(PackageFailed(path=self.output_dir, reason=str(e)))

        self._console.log("Building cross-platform binaries")
        result = self._run_silent(self.compile_command(ctx), cwd=self._root)
        if isinstance(result, Err):
            error = result.error
            return Err(CompileFailed(returncode=error.returncode, detail=error.stderr.strip()))
        self._console.print("")
        return Ok(ctx)

    def _compress_targets(self, ctx: ReleaseContext) -> Result[ReleaseContext, ReleaseError]:
        self._console.log("Compressing target binaries")
        archives: list[ArchiveDescriptor] = []
        for target in ctx.targets:
            raw = self.output_dir / target.artifact_name
            archive = self.output_dir / target.archive_name
            rel = f"{self._config.release.output_dir}/{target.archive_name}"
            self._console.log(rel)

            if not raw.is_file():
                return Err(PackageFailed(path=raw, reason="binary not produced by the build"))
            try:
                _compress(raw, archive, target.archive_format, arc_prefix=self.output_dir.name)
                # a raw binary never outlives its archive
                raw.unlink()
            except (OSError, tarfile.TarError) as e:
                return Err(PackageFailed(path=archive, reason=str(e)))

            archives.append(ArchiveDescriptor(target=target, path=archive))

        return Ok(replace(ctx, archives=tuple(archives)))

    def _generate_shasums(self, ctx: ReleaseContext) -> Result[ReleaseContext, ReleaseError]:
        self._console.log("Generating sha256sum Hashes")
        sidecars: list[Path] = []
        for descriptor in ctx.archives:
            try:
                sidecar = write_sidecar(descriptor.path)
            except OSError as e:
                return Err(PackageFailed(path=descriptor.path, reason=str(e)))
            self._console.log(f"{self._config.release.output_dir}/{sidecar.name}")
            sidecars.append(sidecar)
        return Ok(replace(ctx, sidecars=tuple(sidecars)))

    def _create_git_tag(self, ctx: ReleaseContext) -> Result[ReleaseContext, ReleaseError]:
        tag = ctx.tag
        self._console.log(f"Creating github tag: {tag}")

        created = self._repo.create_tag(tag, message=f"Release {tag}")
        if isinstance(created, Err):
            return Err(TagFailed(tag=tag, message=created.error.message))

        pushed = self._repo.push_tag(tag, remote=self._config.release.remote)
        if isinstance(pushed, Err):
            return Err(TagFailed(tag=tag, message=pushed.error.message))

        self._console.success(
            f"Go to {self._config.project.releases_url} and upload all files from "
            f"'{self._config.release.output_dir}/'"
        )
        self._console.print(
            f"{len(ctx.archives)} archives, {len(ctx.sidecars)} checksums", Style.DIM
        )
        return Ok(ctx)


def _compress(raw: Path, archive: Path, fmt: ArchiveFormat, *, arc_prefix: str) -> None:
    """Write ``raw`` into ``archive`` under ``<arc_prefix>/<name>``."""
    arcname = f"{arc_prefix}/{raw.name}"
    match fmt:
        case ArchiveFormat.TAR_GZ:
            with tarfile.open(archive, "w:gz") as tar:
                tar.add(raw, arcname=arcname)
        case ArchiveFormat.ZIP:
            # Toolchains may emit binaries with mtime=0, which ZIP cannot represent.
            with ZipFile(archive, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
                zf.write(raw, arcname=arcname)
