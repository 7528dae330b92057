"""Exceptions raised by the filesystem primitives."""

from __future__ import annotations

from pathlib import Path


class PreconditionViolation(AssertionError):
    """A caller broke an operation's precondition.

    This is a programming error rather than a recoverable condition, which
    is why it derives from AssertionError and not OSError.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize the violation.

        Args:
            message: Error message
            path: Path the violated precondition was about
        """
        super().__init__(message)
        self.message: str = message
        self.path: Path | None = path


class FileOperationError(OSError):
    """Base exception for failed filesystem operations."""

    def __init__(self, message: str, path: Path) -> None:
        """Initialize the error.

        Args:
            message: Error message
            path: Absolute path the operation failed on
        """
        super().__init__(message)
        self.message: str = message
        self.path: Path = path

    def __str__(self) -> str:
        return self.message


class DeletionError(FileOperationError):
    """The OS rejected removal of a file or directory."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        """Initialize the deletion error.

        Args:
            path: Absolute path that could not be deleted
            reason: Underlying OS error text, if any
        """
        message = f"Failed to delete {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, path)


class DirectoryCreationError(FileOperationError):
    """A directory (or one of its parents) could not be created."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        """Initialize the creation error.

        Args:
            path: Directory that could not be created
            reason: Underlying OS error text, if any
        """
        message = f"Unable to create directory {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, path)


class ProcessLaunchError(FileOperationError):
    """An external helper process could not be started."""

    def __init__(self, command: tuple[str, ...], path: Path, reason: str) -> None:
        """Initialize the launch error.

        Args:
            command: Argument vector that failed to start
            path: Destination path the command was meant to create
            reason: Underlying OS error text
        """
        super().__init__(f"Could not start {command[0]!r}: {reason}", path)
        self.command: tuple[str, ...] = command


class HardLinkError(FileOperationError):
    """The hard-link command ran but exited with a nonzero status."""

    def __init__(
        self,
        source: Path,
        destination: Path,
        returncode: int,
        output: str = "",
    ) -> None:
        """Initialize the hard-link error.

        Args:
            source: Existing file the link should point at
            destination: Link path that was not created
            returncode: Exit status of the link command
            output: Captured command output, if any
        """
        message = f"Failed to link {destination} -> {source} (exit status {returncode})"
        if output:
            message = f"{message}: {output}"
        super().__init__(message, destination)
        self.source: Path = source
        self.returncode: int = returncode
        self.output: str = output
