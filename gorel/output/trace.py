"""Command tracing controlled by the ``DEBUG`` environment variable.

When ``DEBUG`` is set to any non-empty value, every external command is
echoed to stderr before it runs, in the style of ``set -x``.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["DEBUG_ENV_VAR", "debug_enabled", "trace_command"]

DEBUG_ENV_VAR = "DEBUG"


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV_VAR, ""))


@lru_cache(maxsize=1)
def _stderr() -> Console:
    from rich.console import Console

    return Console(stderr=True, highlight=False)


def trace_command(cmd: Sequence[str]) -> None:
    """Echo ``cmd`` to stderr if tracing is enabled."""
    if not debug_enabled():
        return
    _stderr().print(f"+ {shlex.join(cmd)}", style="dim", markup=False)
