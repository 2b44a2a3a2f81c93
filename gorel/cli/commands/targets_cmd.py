from __future__ import annotations

from gorel.cli.context import build_context
from gorel.core.targets import release_targets
from gorel.output.console import Style


def targets() -> None:
    """List release targets and their archive names."""
    ctx = build_context("release")
    for target in release_targets(ctx.config.project.binary):
        ctx.console.print(f"{target.identifier:<16} {target.archive_name}")
    ctx.console.print(f"releases: {ctx.config.project.releases_url}", Style.DIM)
