"""Disk usage accounting over files, directory trees and data directories.

Totals are recomputed from scratch on every call; nothing is cached. The
result is the sum of the sizes observed while walking, so a tree modified
during the scan yields a total that matches no single moment in time.

By default symbolic links to directories are followed without any loop
protection, so a symlink cycle is walked again and again until the OS
refuses to resolve the ever longer path, and files inside the cycle are
counted once per lap. Pass ``guard_cycles=True`` to track visited directories by
their resolved canonical path and skip repeats.

The async variants run the blocking walk in a worker thread via
asyncio.to_thread so an event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Self

from filekeeper.types.aliases import PathLike
from filekeeper.types.protocols import DataDirectoryProvider

if TYPE_CHECKING:
    from filekeeper.core.config import StorageConfig

logger = logging.getLogger(__name__)


def used_space(path: PathLike, *, guard_cycles: bool = False) -> int:
    """Calculate the bytes occupied by a file or everything under a directory.

    Only regular files contribute; directories themselves count as zero, as
    do special files and dangling symbolic links.

    Args:
        path: File or directory to measure
        guard_cycles: Skip directories whose canonical path was already seen

    Returns:
        Total size in bytes

    Raises:
        FileNotFoundError: If ``path`` does not exist
        OSError: If a file cannot be stat'ed or a directory cannot be listed
    """
    visited: set[Path] | None = set() if guard_cycles else None
    return _used_space(Path(path), visited)


def _used_space(path: Path, visited: set[Path] | None) -> int:
    if path.is_file():
        return path.stat().st_size

    if not path.is_dir():
        if path.exists(follow_symlinks=False):
            # Sockets, FIFOs, devices and dangling links hold no file data
            return 0
        raise FileNotFoundError(f"Path does not exist: {path}")

    if visited is not None:
        canonical = path.resolve()
        if canonical in visited:
            logger.debug(
                f"Skipping already visited directory {path}",
                extra={"path": str(path), "canonical_path": str(canonical)},
            )
            return 0
        visited.add(canonical)

    total = 0
    for child in path.iterdir():
        total += _used_space(child, visited)
    return total


def total_used_space(
    directories: Iterable[PathLike],
    *,
    guard_cycles: bool = False,
) -> int:
    """Sum :func:`used_space` over several roots.

    Args:
        directories: Roots to measure, in order
        guard_cycles: Enable symlink cycle protection for each root

    Returns:
        Aggregate size in bytes, rounded to a whole number

    Raises:
        OSError: If any root cannot be measured
    """
    total = 0
    for directory in directories:
        size = used_space(directory, guard_cycles=guard_cycles)
        logger.debug(
            f"Data directory {directory} uses {size} bytes",
            extra={"path": str(directory), "bytes_used": size},
        )
        total += size
    return round(total)


async def used_space_async(path: PathLike, *, guard_cycles: bool = False) -> int:
    """Async wrapper for :func:`used_space` using asyncio.to_thread."""
    return await asyncio.to_thread(used_space, path, guard_cycles=guard_cycles)


class DiskUsageScanner:
    """Measures disk usage across the configured data directories.

    The scanner holds no state besides its collaborators; every call walks
    the filesystem again.

    Example:
        >>> scanner = DiskUsageScanner.from_config(config)
        >>> scanner.total_used_space()
        13314398617
    """

    def __init__(
        self,
        provider: DataDirectoryProvider,
        *,
        guard_cycles: bool = False,
    ) -> None:
        """Initialize the scanner.

        Args:
            provider: Source of the data-directory roots
            guard_cycles: Enable symlink cycle protection
        """
        self.provider: DataDirectoryProvider = provider
        self.guard_cycles: bool = guard_cycles

    @classmethod
    def from_config(cls, config: StorageConfig) -> Self:
        """Create a scanner using the roots and scan options of ``config``."""
        return cls(config, guard_cycles=config.scan.guard_symlink_cycles)

    def used_space(self, path: PathLike) -> int:
        """Calculate the bytes occupied under ``path``.

        Raises:
            OSError: If the path cannot be measured
        """
        return used_space(path, guard_cycles=self.guard_cycles)

    def total_used_space(self) -> int:
        """Calculate the bytes occupied across all data directories.

        Returns:
            Aggregate size in bytes

        Raises:
            OSError: If any data directory cannot be measured
        """
        directories = list(self.provider.data_directories)
        total = total_used_space(directories, guard_cycles=self.guard_cycles)
        logger.info(
            f"Data directories use {total} bytes",
            extra={"directory_count": len(directories), "bytes_used": total},
        )
        return total

    async def total_used_space_async(self) -> int:
        """Async wrapper for :meth:`total_used_space` using asyncio.to_thread."""
        return await asyncio.to_thread(self.total_used_space)
