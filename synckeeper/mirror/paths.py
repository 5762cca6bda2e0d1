"""
Log Paths — Derive and create the per-job log location.

Layout:
    <log_base>/Sync_<safeSource>_to_<safeDest>/SyncLog_<yyyyMMdd_HHmmss>.log
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from .models import LogPaths, SyncJob

logger = logging.getLogger(__name__)

LOG_DIR_PREFIX = "Sync_"
LOG_FILE_PREFIX = "SyncLog_"
LOG_FILE_SUFFIX = ".log"
LOG_FILE_GLOB = f"{LOG_FILE_PREFIX}*{LOG_FILE_SUFFIX}"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# \ / : * ? " < > | and space
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>| ]')

# Leaf used when a path has no segment at all (e.g. "/" or "\\")
EMPTY_LEAF = "root"


class LogDirectoryError(Exception):
    """Raised when the job's log directory cannot be created."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot create log directory {path}: {cause}")


def leaf_name(path: str) -> str:
    """
    Last segment of a Windows or POSIX path string.

    Both separators count on every platform, so UNC shares and drive
    paths behave the same on a Linux test box as on the Windows host.
    """
    trimmed = path.strip().rstrip("\\/")
    if not trimmed:
        return EMPTY_LEAF
    return re.split(r"[\\/]", trimmed)[-1]


def sanitize_segment(segment: str) -> str:
    """Replace characters not allowed in a directory name with underscores."""
    return _UNSAFE_CHARS.sub("_", segment)


def log_directory_name(source_path: str, destination_path: str) -> str:
    safe_source = sanitize_segment(leaf_name(source_path))
    safe_dest = sanitize_segment(leaf_name(destination_path))
    return f"{LOG_DIR_PREFIX}{safe_source}_to_{safe_dest}"


def log_file_name(started_at: datetime) -> str:
    return f"{LOG_FILE_PREFIX}{started_at.strftime(TIMESTAMP_FORMAT)}{LOG_FILE_SUFFIX}"


def derive_log_paths(
    source_path: str,
    destination_path: str,
    log_base_path: str,
    started_at: datetime,
) -> LogPaths:
    """
    Compute the log directory and log file for a run.

    Deterministic for the same inputs and start time.
    """
    log_directory = Path(log_base_path) / log_directory_name(source_path, destination_path)
    return LogPaths(
        log_directory=log_directory,
        log_file=log_directory / log_file_name(started_at),
    )


def paths_for_job(job: SyncJob) -> LogPaths:
    """derive_log_paths for a SyncJob."""
    return derive_log_paths(
        job.source_path,
        job.destination_path,
        job.log_base_path,
        job.started_at,
    )


def ensure_log_directory(path: Path) -> None:
    """
    Create the log directory tree if it does not exist.

    Raises:
        LogDirectoryError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LogDirectoryError(path, e) from e
