"""Hard link creation through the host operating system's link command.

The command is chosen from a strategy table keyed by ``sys.platform``:

- ``win32`` with a Windows version of 6.0 (Vista) or newer:
  ``cmd /c mklink /H <destination> <source>``
- ``win32`` before 6.0: ``fsutil hardlink create <destination> <source>``
- any other platform: ``ln <source> <destination>``

The call blocks until the command exits. A nonzero exit status is raised as
:class:`HardLinkError` together with the command's output.
"""

from __future__ import annotations

import logging
import platform
import re
import subprocess
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Final

from filekeeper.types.aliases import PathLike
from filekeeper.types.models import LinkCommand
from filekeeper.types.protocols import ProcessRunner

from .errors import HardLinkError, ProcessLaunchError

logger = logging.getLogger(__name__)

type LinkStrategy = Callable[[Path, Path, str], LinkCommand]

# First Windows release shipping mklink
MKLINK_MIN_VERSION: Final[tuple[int, int]] = (6, 0)

_VERSION_PART: Final[re.Pattern[str]] = re.compile(r"\d+")


def windows_version(text: str) -> tuple[int, ...]:
    """Extract the (major, minor) numbers from a Windows version string.

    Examples:
        >>> windows_version("10.0.19045")
        (10, 0)
        >>> windows_version("5.1")
        (5, 1)
    """
    return tuple(int(part) for part in _VERSION_PART.findall(text)[:2])


def windows_link_command(source: Path, destination: Path, os_version: str) -> LinkCommand:
    """Build the Windows hard-link command for ``os_version``."""
    if windows_version(os_version) >= MKLINK_MIN_VERSION:
        return LinkCommand(("cmd", "/c", "mklink", "/H", str(destination), str(source)))
    return LinkCommand(("fsutil", "hardlink", "create", str(destination), str(source)))


def posix_link_command(source: Path, destination: Path, os_version: str) -> LinkCommand:  # pyright: ignore[reportUnusedParameter] # strategy signature
    """Build the POSIX ``ln`` command, with stderr folded into stdout."""
    return LinkCommand(("ln", str(source), str(destination)), merge_stderr=True)


LINK_STRATEGIES: Final[Mapping[str, LinkStrategy]] = {
    "win32": windows_link_command,
}

DEFAULT_LINK_STRATEGY: Final[LinkStrategy] = posix_link_command


class HardLinker:
    """Creates hard links by running the platform's link command.

    Platform, OS version and the process runner can be injected, which keeps
    dispatch testable on any host.
    """

    def __init__(
        self,
        *,
        system: str | None = None,
        os_version: str | None = None,
        runner: ProcessRunner | None = None,
        strategies: Mapping[str, LinkStrategy] | None = None,
    ) -> None:
        """Initialize the hard linker.

        Args:
            system: Platform identifier (defaults to ``sys.platform``)
            os_version: OS version string (defaults to ``platform.version()``)
            runner: Process runner (defaults to ``subprocess.run``)
            strategies: Platform to command-builder table
        """
        self.system: str = system if system is not None else sys.platform
        self.os_version: str = os_version if os_version is not None else platform.version()
        self._runner: ProcessRunner = runner if runner is not None else subprocess.run
        self._strategies: Mapping[str, LinkStrategy] = (
            strategies if strategies is not None else LINK_STRATEGIES
        )

    def command_for(self, source: PathLike, destination: PathLike) -> LinkCommand:
        """Build the link command for this platform.

        Both paths are made absolute first.
        """
        strategy = self._strategies.get(self.system, DEFAULT_LINK_STRATEGY)
        return strategy(Path(source).absolute(), Path(destination).absolute(), self.os_version)

    def create_hard_link(self, source: PathLike, destination: PathLike) -> None:
        """Create ``destination`` as a hard link to ``source``.

        Args:
            source: Existing file
            destination: Link path to create

        Raises:
            ProcessLaunchError: If the link command cannot be started
            HardLinkError: If the link command exits with a nonzero status
        """
        source_path = Path(source).absolute()
        destination_path = Path(destination).absolute()
        command = self.command_for(source_path, destination_path)

        logger.debug(
            f"Linking {destination_path} -> {source_path}",
            extra={"command": " ".join(command.argv)},
        )

        try:
            result = self._runner(
                command.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if command.merge_stderr else subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise ProcessLaunchError(command.argv, destination_path, e.strerror or str(e)) from e

        if result.returncode != 0:
            output = b"\n".join(part for part in (result.stdout, result.stderr) if part)
            raise HardLinkError(
                source_path,
                destination_path,
                result.returncode,
                output.decode(errors="replace").strip(),
            )


def create_hard_link(source: PathLike, destination: PathLike) -> None:
    """Create a hard link using the host platform's link command.

    Raises:
        ProcessLaunchError: If the link command cannot be started
        HardLinkError: If the link command exits with a nonzero status
    """
    HardLinker().create_hard_link(source, destination)
