"""Data models for filekeeper.

This module defines immutable dataclasses used to hand file-operation
requests and counters between components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class DeletionTask:
    """Immutable request to delete one path.

    Created on submission to a deletion queue, consumed by exactly one
    worker and discarded afterwards regardless of outcome.
    """

    path: Path
    submitted_at: datetime = field(default_factory=datetime.now)


@dataclass(slots=True, frozen=True)
class DeletionStats:
    """Point-in-time snapshot of deletion queue counters."""

    submitted: int
    deleted: int
    failed: int
    cancelled: int

    @property
    def pending(self) -> int:
        """Tasks accepted but not yet finished or cancelled."""
        return self.submitted - self.deleted - self.failed - self.cancelled


@dataclass(slots=True, frozen=True)
class LinkCommand:
    """Argument vector for one hard-link subprocess invocation."""

    argv: tuple[str, ...]
    merge_stderr: bool = False
