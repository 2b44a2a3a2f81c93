"""Exclusively-owned scratch directory for one install run.

``WorkDir`` is a context manager: the directory is created on entry and
removed recursively on every exit path, including SIGINT and SIGTERM.
While active, both signals are turned into ``WorkDirInterrupted`` so the
stack unwinds through ``__exit__`` instead of the process dying in place.

Usage:
    with WorkDir(prefix="cli.") as workdir:
        download_into(workdir.path)
"""

from __future__ import annotations

import shutil
import signal
import tempfile
import threading
from pathlib import Path
from types import FrameType, TracebackType
from typing import Any

__all__ = ["WorkDir", "WorkDirInterrupted", "default_scratch_root"]

_HANDLED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class WorkDirInterrupted(BaseException):
    """Raised inside an active WorkDir when SIGINT or SIGTERM arrives."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"interrupted by signal {signum}")
        self.signum = signum

    @property
    def exit_code(self) -> int:
        """Shell convention: 128 + signal number."""
        return 128 + self.signum


def default_scratch_root() -> Path:
    """Prefer /var/tmp (survives reboots, often larger) over the temp dir."""
    var_tmp = Path("/var/tmp")
    if var_tmp.is_dir():
        return var_tmp
    return Path(tempfile.gettempdir())


class WorkDir:
    """Scoped scratch directory with guaranteed cleanup."""

    def __init__(self, *, prefix: str = "gorel.", root: Path | None = None) -> None:
        self._prefix = prefix
        self._root = root
        self._path: Path | None = None
        self._previous: dict[signal.Signals, Any] = {}

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("WorkDir is not active")
        return self._path

    def __enter__(self) -> WorkDir:
        root = self._root or default_scratch_root()
        self._path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=str(root)))
        self._install_handlers()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # a second interrupt must not abort the recursive delete
        self._ignore_signals()
        try:
            self.cleanup()
        finally:
            self._restore_handlers()

    def cleanup(self) -> None:
        """Remove the directory tree (idempotent)."""
        if self._path is not None and self._path.exists():
            shutil.rmtree(self._path, ignore_errors=True)

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        raise WorkDirInterrupted(signum)

    def _install_handlers(self) -> None:
        # signal.signal only works from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for sig in _HANDLED_SIGNALS:
            self._previous[sig] = signal.getsignal(sig)
            signal.signal(sig, self._on_signal)

    def _ignore_signals(self) -> None:
        for sig in self._previous:
            signal.signal(sig, signal.SIG_IGN)

    def _restore_handlers(self) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
