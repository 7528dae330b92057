"""Filesystem primitives for deletion, disk usage accounting and hard links."""

from __future__ import annotations

from .deletion import DeletionQueue, delete_confirmed, delete_tree
from .errors import (
    DeletionError,
    DirectoryCreationError,
    FileOperationError,
    HardLinkError,
    PreconditionViolation,
    ProcessLaunchError,
)
from .links import HardLinker, create_hard_link
from .operations import (
    create_directory,
    create_file,
    delete,
    delete_all,
    delete_many,
    exists,
    sort_by_mtime,
)
from .usage import DiskUsageScanner, total_used_space, used_space, used_space_async

__all__ = [
    # Deletion
    "DeletionQueue",
    "delete_confirmed",
    "delete_tree",
    # Basic operations
    "create_directory",
    "create_file",
    "delete",
    "delete_all",
    "delete_many",
    "exists",
    "sort_by_mtime",
    # Disk usage
    "DiskUsageScanner",
    "total_used_space",
    "used_space",
    "used_space_async",
    # Hard links
    "HardLinker",
    "create_hard_link",
    # Errors
    "DeletionError",
    "DirectoryCreationError",
    "FileOperationError",
    "HardLinkError",
    "PreconditionViolation",
    "ProcessLaunchError",
]
