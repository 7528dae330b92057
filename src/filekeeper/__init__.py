"""filekeeper - file existence and disk usage primitives for storage engines.

This package deletes files synchronously or through a background queue,
removes directory trees, measures disk usage across configured data
directories, formats byte counts for display and creates hard links.
"""

from filekeeper.core.config import StorageConfig, load_storage_config
from filekeeper.core.filesystem import (
    DeletionQueue,
    DiskUsageScanner,
    HardLinker,
    create_hard_link,
    delete_confirmed,
    delete_tree,
    used_space,
)
from filekeeper.utils.formatting import format_size, parse_size

__all__ = [
    "DeletionQueue",
    "DiskUsageScanner",
    "HardLinker",
    "StorageConfig",
    "create_hard_link",
    "delete_confirmed",
    "delete_tree",
    "format_size",
    "load_storage_config",
    "parse_size",
    "used_space",
]
