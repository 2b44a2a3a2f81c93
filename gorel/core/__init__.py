"""Core domain types: results, exit codes, configuration and targets."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .errors import ExitCode
from .result import Err, Ok, Result, is_err, is_ok
from .targets import ArchiveFormat, Arch, OperatingSystem, ReleaseTarget, release_targets

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ExitCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # targets
    "Arch",
    "ArchiveFormat",
    "OperatingSystem",
    "ReleaseTarget",
    "release_targets",
]
