"""Unit tests for data models."""

from dataclasses import FrozenInstanceError
from datetime import datetime
from pathlib import Path

import pytest

from filekeeper.types.models import DeletionStats, DeletionTask, LinkCommand


@pytest.mark.unit
class TestDeletionTask:
    """Test DeletionTask."""

    def test_submission_time_defaults_to_now(self) -> None:
        """Tasks are stamped when created."""
        before = datetime.now()
        task = DeletionTask(path=Path("/data/old.db"))

        assert before <= task.submitted_at <= datetime.now()

    def test_immutable(self) -> None:
        """Tasks cannot be modified after submission."""
        task = DeletionTask(path=Path("/data/old.db"))

        with pytest.raises(FrozenInstanceError):
            task.path = Path("/data/other.db")  # pyright: ignore[reportAttributeAccessIssue]


@pytest.mark.unit
class TestDeletionStats:
    """Test DeletionStats."""

    def test_pending(self) -> None:
        """Pending is what has not finished or been cancelled."""
        stats = DeletionStats(submitted=10, deleted=4, failed=2, cancelled=1)

        assert stats.pending == 3

    def test_equality(self) -> None:
        """Snapshots compare by value."""
        assert DeletionStats(1, 1, 0, 0) == DeletionStats(submitted=1, deleted=1, failed=0, cancelled=0)


@pytest.mark.unit
def test_link_command_defaults() -> None:
    """stderr is captured separately unless asked otherwise."""
    command = LinkCommand(("ln", "/a", "/b"))

    assert command.merge_stderr is False
    assert command.argv == ("ln", "/a", "/b")
