"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_install_file"]


def atomic_install_file(src: Path, dest: Path, *, mode: int = 0o755) -> Path:
    """Copy ``src`` to ``dest`` atomically, creating the parent directory.

    The copy is written to a temp file next to ``dest`` and swapped in with
    ``os.replace``, so an existing file at ``dest`` is either fully replaced
    or left untouched.

    Raises:
        OSError: if the copy or the replace fails.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{dest.name}.",
        suffix=".tmp",
        dir=str(dest.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as handle, src.open("rb") as source:
            shutil.copyfileobj(source, handle)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, dest)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)

    return dest
