"""Type definitions and protocols for filekeeper.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 modern syntax)
"""

from filekeeper.types.aliases import PathLike
from filekeeper.types.models import (
    DeletionStats,
    DeletionTask,
    LinkCommand,
)
from filekeeper.types.protocols import (
    DataDirectoryProvider,
    ProcessRunner,
)

__all__ = [
    # Type aliases
    "PathLike",
    # Data models
    "DeletionStats",
    "DeletionTask",
    "LinkCommand",
    # Protocols
    "DataDirectoryProvider",
    "ProcessRunner",
]
