from __future__ import annotations

import os
from pathlib import Path

import typer

from gorel import __version__
from gorel.cli.commands.install_cmd import install
from gorel.cli.commands.release_cmd import release
from gorel.cli.commands.targets_cmd import targets
from gorel.cli.context import CONFIG_ENV_VAR
from gorel.core.errors import ExitCode

# typer re-exports BadParameter from the click build it runs on (the external
# package, or the copy bundled with newer typer releases); UsageError is its base.
UsageError: type[Exception] = next(
    cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError"
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


# Commands
app.command()(install)
app.command()(release)
app.command()(targets)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to gorel.toml (default: ./gorel.toml if present)",
    ),
) -> None:
    if config is not None:
        os.environ[CONFIG_ENV_VAR] = str(config.expanduser())


def main(args: list[str] | None = None) -> None:
    """Console entry point.

    Runs outside click's standalone mode so that usage errors exit with 1
    (invalid option) rather than click's default of 2.
    """
    try:
        code = app(args=args, standalone_mode=False)
    except typer.Abort:
        raise SystemExit(130)
    except UsageError as e:
        e.show()  # type: ignore[attr-defined]
        raise SystemExit(int(ExitCode.INVALID_OPTION))
    raise SystemExit(code if isinstance(code, int) else int(ExitCode.OK))
