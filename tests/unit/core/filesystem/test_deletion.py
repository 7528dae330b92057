"""Unit tests for confirmed and recursive deletion."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from filekeeper.core.filesystem import (
    DeletionError,
    PreconditionViolation,
    delete_confirmed,
    delete_tree,
    operations,
)


def _failing_remove(blocked: Path):
    """Build a remove_path replacement that refuses to remove ``blocked``."""
    real_remove = operations.remove_path

    def remove(path: Path) -> None:
        if path == blocked:
            raise PermissionError(13, "Permission denied", str(path))
        real_remove(path)

    return remove


@pytest.mark.unit
class TestDeleteConfirmed:
    """Test deletion of a single entry that must exist."""

    def test_deletes_file(self, tmp_path: Path) -> None:
        """An existing file is removed."""
        target = tmp_path / "file.db"
        _ = target.write_bytes(b"x")

        delete_confirmed(target)

        assert not target.exists()

    def test_deletes_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory is removed."""
        directory = tmp_path / "empty"
        directory.mkdir()

        delete_confirmed(str(directory))

        assert not directory.exists()

    def test_missing_path_is_precondition_violation(self, tmp_path: Path) -> None:
        """Deleting a missing entry is a programming error."""
        missing = tmp_path / "ghost.db"

        with pytest.raises(PreconditionViolation, match="non-existing file ghost.db") as exc_info:
            delete_confirmed(missing)

        assert exc_info.value.path == missing
        assert isinstance(exc_info.value, AssertionError)
        assert not isinstance(exc_info.value, OSError)

    def test_non_empty_directory_raises_deletion_error(self, data_tree: Path) -> None:
        """The OS refusal is raised with the absolute path."""
        with pytest.raises(DeletionError) as exc_info:
            delete_confirmed(data_tree)

        assert exc_info.value.path == data_tree.absolute()
        assert str(exc_info.value).startswith(f"Failed to delete {data_tree.absolute()}")
        assert data_tree.is_dir()

    def test_os_refusal_is_chained(self, tmp_path: Path) -> None:
        """The underlying OSError is kept as the cause."""
        target = tmp_path / "locked.db"
        _ = target.write_bytes(b"x")

        with patch(
            "filekeeper.core.filesystem.deletion.remove_path",
            side_effect=_failing_remove(target),
        ):
            with pytest.raises(DeletionError, match="Permission denied") as exc_info:
                delete_confirmed(target)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert target.exists()


@pytest.mark.unit
class TestDeleteTree:
    """Test recursive post-order deletion."""

    def test_deletes_whole_tree(self, data_tree: Path) -> None:
        """Every file and directory is removed, root included."""
        delete_tree(data_tree)

        assert not data_tree.exists()

    def test_single_file(self, tmp_path: Path) -> None:
        """A file root is deleted as a single entry."""
        target = tmp_path / "file.db"
        _ = target.write_bytes(b"x")

        delete_tree(target)

        assert not target.exists()

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root is a precondition violation."""
        with pytest.raises(PreconditionViolation):
            delete_tree(tmp_path / "missing")

    def test_children_removed_before_parents(self, data_tree: Path) -> None:
        """Removal order is post-order and children go in name order."""
        removed: list[Path] = []
        real_remove = operations.remove_path

        def recording_remove(path: Path) -> None:
            removed.append(path.relative_to(data_tree.parent))
            real_remove(path)

        with patch("filekeeper.core.filesystem.deletion.remove_path", side_effect=recording_remove):
            delete_tree(data_tree)

        assert removed == [
            Path("data/a.db"),
            Path("data/b.db"),
            Path("data/empty"),
            Path("data/nested/c.idx"),
            Path("data/nested/deeper/d.log"),
            Path("data/nested/deeper"),
            Path("data/nested"),
            Path("data"),
        ]

    def test_does_not_follow_directory_symlinks(self, data_tree: Path, tmp_path: Path) -> None:
        """Linked directories are unlinked, their contents survive."""
        outside = tmp_path / "outside"
        outside.mkdir()
        _ = (outside / "keep.db").write_bytes(b"keep")
        (data_tree / "link").symlink_to(outside, target_is_directory=True)

        delete_tree(data_tree)

        assert not data_tree.exists()
        assert (outside / "keep.db").read_bytes() == b"keep"

    def test_partial_failure_leaves_remaining_entries(self, data_tree: Path) -> None:
        """Failing on one child stops the walk without rollback."""
        blocked = data_tree / "nested" / "c.idx"

        with patch(
            "filekeeper.core.filesystem.deletion.remove_path",
            side_effect=_failing_remove(blocked),
        ):
            with pytest.raises(DeletionError) as exc_info:
                delete_tree(data_tree)

        assert exc_info.value.path == blocked.absolute()
        # Entries sorted before the failure are gone
        assert not (data_tree / "a.db").exists()
        assert not (data_tree / "b.db").exists()
        assert not (data_tree / "empty").exists()
        # The failing entry, its ancestors and later siblings remain
        assert blocked.exists()
        assert (data_tree / "nested" / "deeper" / "d.log").exists()
        assert data_tree.is_dir()

    def test_unlistable_directory_raises_deletion_error(self, data_tree: Path) -> None:
        """A listing failure names the directory that could not be read."""
        nested = data_tree / "nested"
        real_iterdir = Path.iterdir

        def iterdir(self: Path):
            if self == nested:
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        with patch.object(Path, "iterdir", iterdir):
            with pytest.raises(DeletionError) as exc_info:
                delete_tree(data_tree)

        assert exc_info.value.path == nested.absolute()
