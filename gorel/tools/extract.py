"""Archive extraction for downloaded release archives.

- tar.gz: the single leading directory (``bin/`` in release archives) is
  stripped so entries land directly in the destination directory.
- zip: entry paths are junked; every file lands flat in the destination.

Only regular files are extracted. Absolute paths, ``..`` components and
symlinks are skipped.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from gorel.core.errors import ExtractFailed, UnknownArchiveFormat
from gorel.core.result import Err, Ok, Result
from gorel.core.targets import ArchiveFormat

__all__ = ["archive_stem", "extract_archive"]


def archive_stem(archive: Path, fmt: ArchiveFormat) -> str:
    """``cli-linux-amd64.tar.gz`` -> ``cli-linux-amd64``."""
    suffix = f".{fmt.extension}"
    name = archive.name
    return name[: -len(suffix)] if name.endswith(suffix) else name


def extract_archive(
    archive: Path,
    fmt: ArchiveFormat,
    dest: Path | None = None,
) -> Result[Path, ExtractFailed | UnknownArchiveFormat]:
    """Extract ``archive`` into ``dest``.

    Args:
        archive: Verified archive file.
        fmt: Format resolved by platform detection.
        dest: Destination directory; defaults to the archive path without
            its extension, next to the archive.

    Returns:
        Ok(dest), or Err when the format is not handled or extraction fails.
    """
    match fmt:
        case ArchiveFormat.TAR_GZ:
            target = dest or archive.with_name(archive_stem(archive, fmt))
            return _extract_tar_gz(archive, target, strip_components=1)
        case ArchiveFormat.ZIP:
            target = dest or archive.with_name(archive_stem(archive, fmt))
            return _extract_zip_flat(archive, target)
        case _:
            return Err(UnknownArchiveFormat(extension=str(fmt)))


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if len(parts) <= strip_components:
        return None

    kept = parts[strip_components:]
    if any(part in {"", ".", ".."} for part in kept):
        return None
    if kept[0].endswith(":"):
        return None

    return Path(*kept)


def _prepare(dest: Path) -> None:
    if dest.exists():
        shutil.rmtree(dest)
    dest.mkdir(parents=True)


def _extract_tar_gz(
    archive: Path,
    dest: Path,
    *,
    strip_components: int,
) -> Result[Path, ExtractFailed | UnknownArchiveFormat]:
    try:
        _prepare(dest)
        root = dest.resolve()

        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                # Skip directories and non-regular entries (symlink, hardlink, device, fifo)
                if not member.isreg():
                    continue

                rel_path = _safe_relative_path(member.name, strip_components)
                if rel_path is None:
                    continue

                full_path = dest / rel_path
                if not full_path.resolve().is_relative_to(root):
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with src, open(full_path, "wb") as out:
                    shutil.copyfileobj(src, out)

                mode = member.mode & 0o777
                if mode:
                    with contextlib.suppress(OSError):
                        os.chmod(full_path, mode)

        return Ok(dest)

    except (tarfile.TarError, EOFError) as e:
        return Err(ExtractFailed(archive=archive, reason=f"tar extraction failed: {e}"))
    except OSError as e:
        return Err(ExtractFailed(archive=archive, reason=f"IO error: {e}"))


def _extract_zip_flat(
    archive: Path,
    dest: Path,
) -> Result[Path, ExtractFailed | UnknownArchiveFormat]:
    try:
        _prepare(dest)

        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue

                unix_attrs = info.external_attr >> 16
                if stat.S_ISLNK(unix_attrs):
                    continue

                name = PurePosixPath(info.filename.replace("\\", "/")).name
                if name in {"", ".", ".."}:
                    continue

                full_path = dest / name
                with zf.open(info) as src, open(full_path, "wb") as out:
                    shutil.copyfileobj(src, out)

                # Preserve Unix permissions if available
                if unix_attrs & 0o777:
                    full_path.chmod(unix_attrs & 0o777)

        return Ok(dest)

    except zipfile.BadZipFile as e:
        return Err(ExtractFailed(archive=archive, reason=f"invalid zip file: {e}"))
    except OSError as e:
        return Err(ExtractFailed(archive=archive, reason=f"IO error: {e}"))
