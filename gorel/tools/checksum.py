"""SHA-256 digests and ``.sha256sum`` sidecar files.

Sidecars use the text format shared by ``sha256sum`` and ``shasum -a 256``:
one line per file, ``<hexdigest>  <filename>`` (a ``*`` in place of the
second space marks binary mode and is accepted on read).
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

from gorel.core.errors import ChecksumMismatch
from gorel.core.result import Err, Ok, Result
from gorel.core.targets import SIDECAR_SUFFIX

__all__ = [
    "SidecarEntry",
    "parse_sidecar",
    "sha256_file",
    "verify_archive",
    "write_sidecar",
]

_SIDECAR_LINE = re.compile(r"^(?P<digest>[0-9a-fA-F]{64}) [ *](?P<name>.+)$")


@dataclass(frozen=True, slots=True)
class SidecarEntry:
    digest: str
    filename: str


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def parse_sidecar(text: str) -> list[SidecarEntry]:
    """Parse sidecar content, skipping blank or malformed lines."""
    entries: list[SidecarEntry] = []
    for line in text.splitlines():
        m = _SIDECAR_LINE.match(line.rstrip("\r"))
        if m is None:
            continue
        entries.append(
            SidecarEntry(digest=m["digest"].lower(), filename=m["name"].strip())
        )
    return entries


def write_sidecar(archive: Path) -> Path:
    """Write ``<archive>.sha256sum`` next to ``archive`` and return its path."""
    sidecar = archive.with_name(f"{archive.name}{SIDECAR_SUFFIX}")
    sidecar.write_text(f"{sha256_file(archive)}  {archive.name}\n", encoding="utf-8")
    return sidecar


def verify_archive(archive: Path, sidecar: Path) -> Result[str, ChecksumMismatch]:
    """Check ``archive`` against the digest recorded in ``sidecar``.

    The sidecar entry naming the archive is used; a sidecar holding a single
    entry is accepted whatever file name it records.

    Returns:
        Ok(hexdigest) when the digests match, Err(ChecksumMismatch) otherwise.
    """
    try:
        entries = parse_sidecar(sidecar.read_text(encoding="utf-8"))
        actual = sha256_file(archive)
    except (OSError, UnicodeDecodeError) as e:
        return Err(ChecksumMismatch(archive=archive, expected="", actual="", reason=str(e)))

    named = [x for x in entries if Path(x.filename).name == archive.name]
    if named:
        entry = named[0]
    elif len(entries) == 1:
        entry = entries[0]
    else:
        return Err(
            ChecksumMismatch(
                archive=archive,
                expected="",
                actual=actual,
                reason=f"no digest recorded in {sidecar.name}",
            )
        )

    if entry.digest != actual:
        return Err(ChecksumMismatch(archive=archive, expected=entry.digest, actual=actual))
    return Ok(actual)
