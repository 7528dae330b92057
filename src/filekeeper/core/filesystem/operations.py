"""Basic file and directory existence operations.

Everything here runs synchronously on the caller's thread. Only the
presence of entries is managed; file contents are never read or written.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableSequence
from pathlib import Path

from filekeeper.types.aliases import PathLike

from .errors import DirectoryCreationError

logger = logging.getLogger(__name__)


def remove_path(path: Path) -> None:
    """Remove a single file, symlink or empty directory.

    Symbolic links are removed as links even when they point at a
    directory. A non-empty directory is rejected by the OS.

    Args:
        path: Entry to remove

    Raises:
        OSError: If the OS rejects the removal or the entry is absent
    """
    if path.is_dir() and not path.is_symlink():
        path.rmdir()
    else:
        path.unlink()


def exists(path: PathLike) -> bool:
    """Check whether ``path`` names an existing entry.

    Broken symbolic links count as existing, since they can still be deleted.
    """
    return Path(path).exists(follow_symlinks=False)


def create_directory(path: PathLike) -> Path:
    """Create a directory and any missing parents.

    An already existing directory is left as is.

    Args:
        path: Directory to create

    Returns:
        The directory path

    Raises:
        DirectoryCreationError: If the directory cannot be created
    """
    directory = Path(path)
    if directory.exists():
        return directory

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(directory.absolute(), e.strerror or str(e)) from e

    logger.debug(f"Created directory {directory}", extra={"path": str(directory)})
    return directory


def create_file(path: PathLike) -> Path:
    """Create an empty file unless one already exists.

    Args:
        path: File to create; its parent directory must exist

    Returns:
        The file path

    Raises:
        OSError: If the file cannot be created
    """
    file_path = Path(path)
    if not file_path.exists():
        file_path.touch(exist_ok=True)
    return file_path


def delete(path: PathLike) -> bool:
    """Delete a single entry without confirmation.

    Args:
        path: File, symlink or empty directory to delete

    Returns:
        True if the entry was removed, False otherwise
    """
    try:
        remove_path(Path(path))
    except OSError:
        return False
    return True


def delete_many(paths: MutableSequence[str]) -> bool:
    """Delete each path in ``paths``, pruning successes from the list.

    Entries that were deleted are removed from ``paths`` in place, so on
    return the list holds only the paths that are still present.

    Args:
        paths: Paths to delete; mutated in place

    Returns:
        Whether the last deletion attempted succeeded (True for an empty list)
    """
    succeeded = True
    remaining: list[str] = []
    for entry in paths:
        succeeded = delete(entry)
        if succeeded:
            logger.debug(f"Deleted file {entry}", extra={"path": entry})
        else:
            remaining.append(entry)
    paths[:] = remaining
    return succeeded


def delete_all(paths: Iterable[PathLike]) -> None:
    """Best-effort delete of every path, ignoring individual failures."""
    for entry in paths:
        _ = delete(entry)


def sort_by_mtime(paths: Iterable[PathLike]) -> list[Path]:
    """Order paths by last modification time, oldest first.

    Args:
        paths: Existing paths to order

    Returns:
        New list sorted by ascending modification time

    Raises:
        OSError: If any path cannot be stat'ed
    """
    return sorted((Path(p) for p in paths), key=lambda p: p.stat().st_mtime)
