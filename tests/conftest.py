"""
Shared fixtures for synckeeper tests.

Provides a fixed job start time, a temporary log base directory and a
SyncJob factory. Subprocess calls are mocked in each test module.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pytest

from synckeeper.mirror.models import SyncJob

STARTED_AT = datetime(2026, 1, 31, 2, 0, 0)


@pytest.fixture
def log_base(tmp_path: Path) -> Path:
    """Base directory for job log folders."""
    base = tmp_path / "logs"
    base.mkdir()
    return base


@pytest.fixture
def make_job(log_base: Path):
    """Factory for SyncJob instances rooted at the temp log base."""

    def _make(**overrides) -> SyncJob:
        values = {
            "source_path": r"\\SrvA\Data",
            "destination_path": r"D:\Mirror",
            "log_base_path": str(log_base),
            "started_at": STARTED_AT,
        }
        values.update(overrides)
        return SyncJob(**values)

    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Leave the package logger as we found it."""
    pkg = logging.getLogger("synckeeper")
    level = pkg.level
    handlers = list(pkg.handlers)
    yield
    pkg.setLevel(level)
    pkg.handlers[:] = handlers


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers
