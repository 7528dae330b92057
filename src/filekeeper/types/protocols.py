"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols for the collaborators
the filesystem primitives consume without requiring inheritance.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class DataDirectoryProvider(Protocol):
    """Protocol for the source of configured data-directory roots.

    Any object exposing an ordered ``data_directories`` sequence satisfies
    it, including the bundled :class:`filekeeper.core.config.StorageConfig`.
    """

    @property
    def data_directories(self) -> Sequence[Path]:
        """Ordered data-directory root paths."""
        ...


class ProcessRunner(Protocol):
    """Protocol for launching a command and waiting for it to exit.

    Matches the call shape of :func:`subprocess.run` used by the hard linker,
    so tests can substitute a fake without spawning processes.
    """

    def __call__(
        self,
        args: Sequence[str],
        *,
        stdout: int | None,
        stderr: int | None,
        check: bool,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run ``args`` to completion."""
        ...
