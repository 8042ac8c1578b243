"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """Run with no board settings in the environment and an empty cwd.

    Returns the temporary working directory.
    """
    # setenv first so values loaded from .env during the test are undone afterwards
    for name in ("API_URL", "API_KEY", "BOARD_ID", "OUTPUT_DIR", "PAGE_LIMIT", "BOARD_EXTRACT_LOG_API"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
