from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from gorel.core.config import Config, load_config_or_default
from gorel.core.result import Err
from gorel.output.console import ConsoleProtocol, RichConsole
from gorel.output.errors import error_exit_code, print_error

CONFIG_ENV_VAR = "GOREL_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def build_context(purpose: str) -> CLIContext:
    console = RichConsole(purpose=purpose)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    config_result = load_config_or_default(Path(env_path) if env_path else None)
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=error_exit_code(config_result.error))

    return CLIContext(config=config_result.value, console=console)
