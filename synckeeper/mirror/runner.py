"""
Mirror Runner — Drive one mirror job from start to exit code.

    validate → derive log paths → ensure log directory (99 on failure)
    → invoke mirror tool (97 if it cannot start) → classify exit code
    → rotate logs (best-effort) → exit code

There is no whole-job retry; retries happen inside the mirror tool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from ..config.loader import Settings
from ..logging_config import attach_run_log, detach_run_log
from .exit_codes import classify_exit
from .models import (
    EXIT_LAUNCH_FAILED,
    EXIT_LOG_DIR_FAILED,
    ExitClassification,
    LogPaths,
    MirrorResult,
    Severity,
    SyncJob,
)
from .paths import LogDirectoryError, ensure_log_directory, paths_for_job
from .robocopy import MirrorLaunchError, invoke_mirror
from .rotation import rotate_logs

logger = logging.getLogger(__name__)

SEVERITY_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


@dataclass
class RunOutcome:
    """Everything a caller may want to report about one run."""

    job: SyncJob
    paths: LogPaths
    classification: ExitClassification
    mirror_result: Optional[MirrorResult] = None
    deleted_logs: List[Path] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return self.classification.code


def _log_classification(classification: ExitClassification, job: SyncJob) -> None:
    level = SEVERITY_LEVELS[classification.severity]
    logger.log(
        level,
        f"Exit code {classification.code}: {classification.status}",
        extra={"job": job.display_name, "exit_code": classification.code},
    )


def run_sync_job(job: SyncJob, settings: Optional[Settings] = None) -> RunOutcome:
    """
    Run one mirror job and return its outcome.

    Never raises for the wrapper's own fatal conditions; they become
    exit codes 97 and 99 on the returned outcome.
    """
    settings = settings or Settings()
    paths = paths_for_job(job)

    try:
        ensure_log_directory(paths.log_directory)
    except LogDirectoryError as e:
        classification = classify_exit(EXIT_LOG_DIR_FAILED)
        logger.critical(str(e))
        _log_classification(classification, job)
        return RunOutcome(job=job, paths=paths, classification=classification)

    handler = attach_run_log(paths.log_file)
    try:
        logger.info(f"Mirror job started: {job.display_name}")
        logger.info(
            f"Threads: {job.threads}, logs kept: {job.max_logs}, log file: {paths.log_file}"
        )

        mirror_result: Optional[MirrorResult] = None
        try:
            mirror_result = invoke_mirror(job, paths.log_file, settings.robocopy_exe)
            code = mirror_result.returncode
        except MirrorLaunchError as e:
            logger.critical(str(e))
            code = EXIT_LAUNCH_FAILED

        classification = classify_exit(code)
        _log_classification(classification, job)

        deleted = rotate_logs(paths.log_directory, job.max_logs)

        logger.info(f"Mirror job finished with exit code {classification.code}")
        if handler.failures:
            logger.warning(f"{handler.failures} line(s) could not be written to {paths.log_file}")
    finally:
        detach_run_log(handler)

    return RunOutcome(
        job=job,
        paths=paths,
        classification=classification,
        mirror_result=mirror_result,
        deleted_logs=deleted,
    )


def run_jobs(jobs: Iterable[SyncJob], settings: Optional[Settings] = None) -> List[RunOutcome]:
    """
    Run jobs one after another, in order.

    Each job is restamped with the time it actually starts, so its run log
    name reflects that start rather than when the job was built.
    """
    outcomes: List[RunOutcome] = []
    for job in jobs:
        job = job.model_copy(update={"started_at": datetime.now()})
        outcomes.append(run_sync_job(job, settings))
    return outcomes


def combined_exit_code(outcomes: Iterable[RunOutcome]) -> int:
    """Highest exit code across several runs (0 if there were none)."""
    return max((o.exit_code for o in outcomes), default=0)
