"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from filekeeper.utils.logging import clear_correlation_id


@pytest.fixture(autouse=True)
def reset_correlation_id() -> Generator[None, None, None]:
    """Ensure no correlation ID leaks between tests."""
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def data_tree(tmp_path: Path) -> Path:
    """Create a small data directory tree.

    Layout (sizes in bytes)::

        data/
            a.db        100
            b.db        250
            nested/
                c.idx   40
                deeper/
                    d.log  10
            empty/
    """
    root = tmp_path / "data"
    nested = root / "nested"
    deeper = nested / "deeper"
    deeper.mkdir(parents=True)
    (root / "empty").mkdir()

    _ = (root / "a.db").write_bytes(b"a" * 100)
    _ = (root / "b.db").write_bytes(b"b" * 250)
    _ = (nested / "c.idx").write_bytes(b"c" * 40)
    _ = (deeper / "d.log").write_bytes(b"d" * 10)
    return root
