from __future__ import annotations

from pathlib import Path

import typer

from gorel.cli.context import build_context
from gorel.core.errors import ExitCode
from gorel.core.result import Err
from gorel.output.errors import error_exit_code, print_error
from gorel.platform.workdir import WorkDirInterrupted
from gorel.services.install import InstallOptions, InstallService
from gorel.tools.download import LATEST


def install(
    version: str = typer.Option(
        LATEST,
        "-v",
        "--version",
        help="Specifies a version (ex: 0.1.0)",
    ),
    target: str | None = typer.Option(
        None,
        "-t",
        "--target",
        help="Specifies the target of the program to download (default: detected, ex: linux-amd64)",
    ),
    install_dir: Path | None = typer.Option(
        None,
        "-d",
        "--install-dir",
        help="Directory to install the binary into (default: from config, /usr/local/bin)",
    ),
) -> None:
    """Install the released binary for this machine."""
    ctx = build_context("install")
    service = InstallService(config=ctx.config, console=ctx.console)
    options = InstallOptions(
        install_dir=(install_dir or ctx.config.install.dir).expanduser().resolve(),
        version=version.strip() or LATEST,
        target=target.strip() if target else None,
    )

    try:
        result = service.install(options)
    except WorkDirInterrupted as e:
        ctx.console.warn(f"installation {e}")
        raise typer.Exit(code=e.exit_code)
    except Exception as e:  # noqa: BLE001
        ctx.console.warn(f"installation failed: {e}")
        raise typer.Exit(code=int(ExitCode.PIPELINE_FAILURE))

    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))
