"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def _isolated_db_env(monkeypatch, tmp_path):
    """Keep every test away from a real ./data directory."""
    monkeypatch.setenv("PROMPTBOX_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("PROMPTBOX_DB_PATH", raising=False)
