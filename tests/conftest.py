"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fsfacade.filesystem import Filesystem


@pytest.fixture
def fs() -> Filesystem:
    """Create a facade with default configuration."""
    return Filesystem()


@pytest.fixture
def temp_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default config location at an empty temporary directory."""
    config_dir = tmp_path / ".fsfacade"
    config_dir.mkdir()
    monkeypatch.setattr("fsfacade.config.CONFIG_DIR", config_dir)
    return config_dir


# ============================================================================
# Tree Fixtures
# ============================================================================


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a nested directory tree of 18 bytes in total.

    Layout::

        tree/
            a.txt           "abc"
            sub/
                b.txt       "hello"
                deeper/
                    c.bin   10 bytes
            empty/
    """
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("abc")
    (root / "sub" / "b.txt").write_text("hello")
    (root / "sub" / "deeper" / "c.bin").write_bytes(b"0123456789")
    return root


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Create a small text file."""
    path = tmp_path / "sample.txt"
    path.write_text("abc")
    return path


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all facade calls without touching real files.
    """
    fs = MagicMock()
    fs.exists.return_value = False
    fs.is_dir.return_value = False
    fs.is_file.return_value = False
    fs.read_file.return_value = ""
    return fs


@pytest.fixture
def mock_display() -> MagicMock:
    """Create a mock Display."""
    return MagicMock()


@pytest.fixture
def mock_app_context(mock_filesystem: MagicMock, mock_display: MagicMock):
    """Create an AppContext wired to mocks."""
    from fsfacade.context import AppContext

    return AppContext(filesystem=mock_filesystem, display=mock_display)
