"""
File helpers for the transition.

Writes go through a temp file in the destination directory and are
swapped into place, so a reader never sees a half-written document.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = ["atomic_write", "list_files", "read_snapshot", "replace_dir_with_copy"]


def atomic_write(path: Path, content: str) -> None:
    """Write content to path via a temp file and os.replace()."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def list_files(directory: Path) -> list[str]:
    """Return every file under directory as sorted, '/'-separated relative paths.

    A missing directory yields an empty list.
    """
    if not directory.is_dir():
        return []
    return sorted(
        p.relative_to(directory).as_posix()
        for p in directory.rglob("*")
        if p.is_file()
    )


def read_snapshot(directory: Path) -> dict[str, bytes]:
    """Read every file under directory into a {relative_path: raw bytes} mapping."""
    return {rel_path: (directory / rel_path).read_bytes() for rel_path in list_files(directory)}


def replace_dir_with_copy(source: Path, dest: Path) -> None:
    """Replace dest with a recursive copy of source.

    The copy is made into a sibling `<dest>.new` directory first and only
    swapped in once complete. A failure during the swap can leave that
    sibling behind; the next run removes it.
    """
    staging = dest.with_name(dest.name + ".new")
    if staging.exists():
        shutil.rmtree(staging)
    shutil.copytree(source, staging, symlinks=True)

    if dest.exists():
        shutil.rmtree(dest)
    staging.rename(dest)
    logger.debug(f"Copied {source} to {dest}")
