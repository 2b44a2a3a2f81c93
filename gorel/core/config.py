"""Typed configuration loading and access.

Configuration is optional: every field has a default matching the project
gorel was written for, and a ``gorel.toml`` file only overrides what it
names.

    [project]
    binary = "cli"
    github_org = "afiune"
    github_repo = "go-release"

    [install]
    dir = "/usr/local/bin"

    [release]
    branch = "master"
    version_file = "VERSION"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "InstallConfig",
    "ProjectConfig",
    "ReleaseConfig",
    "CONFIG_FILENAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "gorel.toml"

DEFAULT_BINARY = "cli"
DEFAULT_GITHUB_ORG = "afiune"
DEFAULT_GITHUB_REPO = "go-release"
DEFAULT_INSTALL_DIR = "/usr/local/bin"
DEFAULT_RELEASE_BRANCH = "master"
DEFAULT_COMPILE_TOOL = "gox"
DEFAULT_COMPILE_TOOL_PACKAGE = "github.com/mitchellh/gox@latest"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Identity of the program being released and installed."""

    binary: str = DEFAULT_BINARY
    github_org: str = DEFAULT_GITHUB_ORG
    github_repo: str = DEFAULT_GITHUB_REPO
    releases_url_override: str | None = None
    module_override: str | None = None

    @property
    def releases_url(self) -> str:
        if self.releases_url_override:
            return self.releases_url_override.rstrip("/")
        return f"https://github.com/{self.github_org}/{self.github_repo}/releases"

    @property
    def module(self) -> str:
        """Go module path handed to the compile-matrix tool."""
        return self.module_override or f"github.com/{self.github_org}/{self.github_repo}"


@dataclass(frozen=True, slots=True)
class InstallConfig:
    dir: Path = Path(DEFAULT_INSTALL_DIR)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    branch: str = DEFAULT_RELEASE_BRANCH
    version_file: str = "VERSION"
    output_dir: str = "bin"
    remote: str = "origin"
    compile_tool: str = DEFAULT_COMPILE_TOOL
    compile_tool_package: str = DEFAULT_COMPILE_TOOL_PACKAGE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        project: StrDict = get_table(data, "project") or {}
        install: StrDict = get_table(data, "install") or {}
        release: StrDict = get_table(data, "release") or {}

        return cls(
            project=ProjectConfig(
                binary=get_str(project, "binary") or DEFAULT_BINARY,
                github_org=get_str(project, "github_org") or DEFAULT_GITHUB_ORG,
                github_repo=get_str(project, "github_repo") or DEFAULT_GITHUB_REPO,
                releases_url_override=get_str(project, "releases_url"),
                module_override=get_str(project, "module"),
            ),
            install=InstallConfig(
                dir=Path(get_str(install, "dir") or DEFAULT_INSTALL_DIR).expanduser(),
            ),
            release=ReleaseConfig(
                branch=get_str(release, "branch") or DEFAULT_RELEASE_BRANCH,
                version_file=get_str(release, "version_file") or "VERSION",
                output_dir=get_str(release, "output_dir") or "bin",
                remote=get_str(release, "remote") or "origin",
                compile_tool=get_str(release, "compile_tool") or DEFAULT_COMPILE_TOOL,
                compile_tool_package=get_str(release, "compile_tool_package")
                or DEFAULT_COMPILE_TOOL_PACKAGE,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(
    path: Path | None, *, cwd: Path | None = None
) -> Result[Config, ConfigError]:
    """Resolve the effective configuration.

    An explicit ``path`` must exist and parse. Without one, ``gorel.toml`` in
    ``cwd`` is used when present, otherwise the built-in defaults apply.
    """
    if path is not None:
        return load_config(path)

    candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return load_config(candidate)
    return Ok(Config())
