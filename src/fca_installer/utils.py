"""Filesystem helpers shared by both deployment strategies.

Per DRY: Central helpers eliminate duplicated write and prune logic across strategies.
"""

import logging
import os
import tempfile
from pathlib import Path

from .exceptions import DeployIOError

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write data to path via a sibling temp file and os.replace.

    A reader never sees a half-written file. Parent directories are created.

    Raises:
        DeployIOError: If the directory or file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise DeployIOError(f"Failed to write {path}: {e}", path=path) from e


def atomic_write_text(path: Path, text: str) -> None:
    """Text variant of atomic_write_bytes (UTF-8)."""
    atomic_write_bytes(path, text.encode("utf-8"))


def remove_file(path: Path) -> bool:
    """Delete a file or symlink if present.

    Returns:
        True if something was removed, False if nothing was there

    Raises:
        DeployIOError: If the path exists but cannot be removed
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise DeployIOError(f"Failed to remove {path}: {e}", path=path) from e
    return True


def remove_dir_if_empty(directory: Path) -> bool:
    """Remove directory only when it holds nothing.

    Never force-removes: a non-empty directory may hold files we did not create.

    Returns:
        True if the directory was removed
    """
    if not directory.is_dir() or directory.is_symlink():
        return False

    if any(directory.iterdir()):
        logger.debug(f"Keeping non-empty directory: {directory}")
        return False

    try:
        directory.rmdir()
    except OSError as e:
        raise DeployIOError(f"Failed to remove directory {directory}: {e}", path=directory) from e

    logger.debug(f"Removed empty directory: {directory}")
    return True
