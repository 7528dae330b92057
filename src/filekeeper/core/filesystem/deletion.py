"""Synchronous, recursive and background file deletion.

This module provides three ways of removing entries:

- :func:`delete_confirmed` removes one entry that must exist and raises on
  failure.
- :func:`delete_tree` removes a directory tree post-order (children before
  their parent), failing fast on the first entry the OS refuses to remove.
- :class:`DeletionQueue` accepts fire-and-forget requests and removes the
  entries on a pool of worker threads. Failures there are logged, never
  raised to the submitter, and never retried.

No locking is performed against other processes: deleting a tree that is
being concurrently modified, or scanning one that is being deleted, gives
results that depend on timing. Coordinating such access is up to callers.
"""

from __future__ import annotations

import contextvars
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Final, Self

from filekeeper.types.aliases import PathLike
from filekeeper.types.models import DeletionStats, DeletionTask

from .errors import DeletionError, PreconditionViolation
from .operations import remove_path

if TYPE_CHECKING:
    from filekeeper.core.config import StorageConfig

logger = logging.getLogger(__name__)

DEFAULT_THREAD_NAME_PREFIX: Final[str] = "filekeeper-delete"


def delete_confirmed(path: PathLike) -> None:
    """Delete a single entry that is known to exist.

    Args:
        path: File, symlink or empty directory to delete

    Raises:
        PreconditionViolation: If ``path`` does not exist
        DeletionError: If the OS rejects the removal (permission denied,
            directory not empty, file in use, ...)
    """
    target = Path(path)
    if not target.exists(follow_symlinks=False):
        raise PreconditionViolation(
            f"attempted to delete non-existing file {target.name}",
            path=target,
        )

    try:
        remove_path(target)
    except OSError as e:
        raise DeletionError(target.absolute(), e.strerror or str(e)) from e


def delete_tree(path: PathLike) -> None:
    """Delete a directory and everything beneath it.

    Children are visited in name order and each is removed before its
    parent. If ``path`` is not a directory it is deleted as a single entry.
    Symbolic links to directories are removed as links, not followed.

    There is no rollback: when a child cannot be deleted the error is raised
    immediately, entries removed before it stay removed and the directories
    on the path to it remain.

    Args:
        path: Root of the tree to delete

    Raises:
        PreconditionViolation: If ``path`` does not exist
        DeletionError: Naming the absolute path of the first entry that
            could not be listed or removed
    """
    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        try:
            children = sorted(target.iterdir())
        except OSError as e:
            raise DeletionError(target.absolute(), e.strerror or str(e)) from e

        for child in children:
            delete_tree(child)

    # The directory is empty now, so it can go
    delete_confirmed(target)


class DeletionQueue:
    """Background deletion service backed by a bounded thread pool.

    Requests are accepted by :meth:`submit` and executed at most once by
    one worker. The submitter never learns the outcome: failures, including
    entries that are already gone, become ERROR log events.

    The queue is an explicit service object. Create one per owner, pass it
    to whoever needs asynchronous deletion and call :meth:`shutdown` (or use
    it as a context manager) when done.

    Example:
        >>> with DeletionQueue(max_workers=2) as queue:
        ...     queue.submit("/var/lib/data/obsolete-1.db")
    """

    def __init__(
        self,
        max_workers: int = 1,
        *,
        thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX,
    ) -> None:
        """Initialize the deletion queue and its worker pool.

        Args:
            max_workers: Number of worker threads
            thread_name_prefix: Prefix for worker thread names

        Raises:
            ValueError: If max_workers is not positive
        """
        if max_workers < 1:
            msg = "max_workers must be at least 1"
            raise ValueError(msg)

        self.max_workers: int = max_workers
        self._executor: ThreadPoolExecutor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._lock: threading.Lock = threading.Lock()
        self._idle: threading.Condition = threading.Condition(self._lock)
        self._accepting: bool = True
        self._pending: set[Future[None]] = set()

        self._stats: dict[str, int] = {
            "submitted": 0,
            "deleted": 0,
            "failed": 0,
            "cancelled": 0,
        }

        logger.info(
            f"Deletion queue started with {max_workers} worker threads",
            extra={"worker_threads": max_workers},
        )

    @classmethod
    def from_config(cls, config: StorageConfig) -> Self:
        """Create a queue sized by the deletion section of ``config``."""
        return cls(max_workers=config.deletion.max_workers)

    @property
    def is_running(self) -> bool:
        """Whether the queue still accepts new requests."""
        with self._lock:
            return self._accepting

    def submit(self, path: PathLike) -> None:
        """Request deletion of ``path`` and return immediately.

        Nonexistent paths are accepted; the worker logs the failure. After
        :meth:`shutdown` requests are dropped with a warning.

        Args:
            path: Entry to delete
        """
        task = DeletionTask(path=Path(path))

        with self._lock:
            if not self._accepting:
                logger.warning(
                    f"Deletion queue is shut down, dropping request for {task.path}",
                    extra={"path": str(task.path)},
                )
                return

            # Run in a copy of the submitter's context so its correlation ID
            # is attached to the worker's log records
            context = contextvars.copy_context()
            future = self._executor.submit(context.run, self._execute, task)
            self._stats["submitted"] += 1
            self._pending.add(future)

        future.add_done_callback(self._on_done)

    def shutdown(self) -> None:
        """Stop accepting requests and cancel those not yet started.

        Deletions already running are left to finish on their own; this
        method does not wait for them.
        """
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False

        self._executor.shutdown(wait=False, cancel_futures=True)
        stats = self.stats()
        logger.info(
            f"Deletion queue shut down with {stats.pending} requests still pending",
            extra={"submitted": stats.submitted, "cancelled": stats.cancelled},
        )

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every accepted request has finished or been cancelled.

        Args:
            timeout: Maximum seconds to wait (None waits indefinitely)

        Returns:
            True if the queue drained within the timeout
        """
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending, timeout=timeout)

    def stats(self) -> DeletionStats:
        """Get a snapshot of the queue counters."""
        with self._lock:
            return DeletionStats(**self._stats)

    def _execute(self, task: DeletionTask) -> None:
        """Delete one entry, logging instead of raising on failure."""
        waited = (datetime.now() - task.submitted_at).total_seconds()
        logger.debug(
            f"Deleting {task.path.name}",
            extra={"path": str(task.path), "queued_seconds": waited},
        )
        try:
            remove_path(task.path)
        except OSError as e:
            logger.error(
                f"Unable to delete file {task.path.absolute()}",
                extra={"path": str(task.path.absolute()), "error": str(e)},
            )
            self._count("failed")
        except Exception:
            logger.exception(
                f"Unexpected error deleting {task.path.absolute()}",
                extra={"path": str(task.path.absolute())},
            )
            self._count("failed")
        else:
            self._count("deleted")

    def _on_done(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)
            if future.cancelled():
                self._stats["cancelled"] += 1
            if not self._pending:
                self._idle.notify_all()

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.shutdown()
