from __future__ import annotations

from pathlib import Path

import typer

from gorel.cli.context import build_context
from gorel.core.errors import ExitCode
from gorel.core.result import Err
from gorel.output.console import Style
from gorel.output.errors import error_exit_code, print_error
from gorel.services.release import ReleaseService


def release() -> None:
    """Build, package, checksum and tag a new release from this checkout."""
    ctx = build_context("release")
    service = ReleaseService(root=Path.cwd(), config=ctx.config, console=ctx.console)

    try:
        result = service.release()
    except Exception as e:  # noqa: BLE001
        ctx.console.warn(f"release failed: {e}")
        raise typer.Exit(code=int(ExitCode.PIPELINE_FAILURE))

    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))

    ctx.console.print(f"released {result.value.tag}", Style.SUCCESS)
