"""
Log Rotation — Keep the newest N run logs of a job.

Log file names embed a fixed-width yyyyMMdd_HHmmss timestamp, so sorting
by name descending is newest first.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .paths import LOG_FILE_GLOB

logger = logging.getLogger(__name__)


def list_run_logs(log_directory: Path) -> List[Path]:
    """Run log files in a job directory, newest first."""
    logs = [p for p in log_directory.glob(LOG_FILE_GLOB) if p.is_file()]
    return sorted(logs, key=lambda p: p.name, reverse=True)


def rotate_logs(log_directory: Path, keep: int) -> List[Path]:
    """
    Delete all but the newest `keep` run logs.

    Best-effort: failures are logged and never raised.

    Returns:
        The paths that were deleted.
    """
    try:
        logs = list_run_logs(log_directory)
    except OSError as e:
        logger.error(f"Log rotation skipped, cannot list {log_directory}: {e}")
        return []

    stale = logs[keep:]
    if not stale:
        logger.debug(f"Log rotation: {len(logs)} file(s), nothing to remove (keep {keep})")
        return []

    deleted: List[Path] = []
    for path in stale:
        try:
            path.unlink()
            deleted.append(path)
            logger.debug(f"Removed old log {path.name}")
        except OSError as e:
            logger.warning(f"Could not remove old log {path}: {e}")

    logger.info(f"Log rotation: removed {len(deleted)} of {len(stale)} old log(s), keeping {keep}")
    return deleted
