"""
Robocopy — Build the mirror command line and run it.

The flag set is fixed:
    /MIR        mirror: copy and delete destination entries absent from source
    /SEC        copy security (ACLs) along with data, attributes, timestamps
    /DCOPY:T    keep directory timestamps
    /ZB         restartable mode, falling back to backup mode on access denied
    /R:2 /W:5   retry a failed file twice, five seconds apart
    /MT:n       multi-threaded copy
    /XJD /XJF   skip directory and file junctions (reparse points)
    /NP         no per-file progress percentage
    /UNILOG:f   unicode log, overwriting f (/UNILOG+: appends)

Only the exit code is interpreted. Output is captured raw and logged at
DEBUG; the content of robocopy's own log is never parsed.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import List

from .models import MirrorResult, SyncJob

logger = logging.getLogger(__name__)

RETRY_COUNT = 2
RETRY_WAIT_SECONDS = 5


class MirrorLaunchError(Exception):
    """Raised when the mirror tool cannot be started at all."""

    def __init__(self, executable: str, cause: OSError):
        self.executable = executable
        self.cause = cause
        super().__init__(f"Cannot launch {executable}: {cause}")


def build_mirror_command(job: SyncJob, log_file: Path, executable: str = "robocopy") -> List[str]:
    """Construct the argument vector for one mirror run."""
    log_flag = "/UNILOG+:" if job.append_log else "/UNILOG:"
    return [
        executable,
        job.source_path,
        job.destination_path,
        "/MIR",
        "/SEC",
        "/DCOPY:T",
        "/ZB",
        f"/R:{RETRY_COUNT}",
        f"/W:{RETRY_WAIT_SECONDS}",
        f"/MT:{job.threads}",
        "/XJD",
        "/XJF",
        "/NP",
        f"{log_flag}{log_file}",
    ]


def invoke_mirror(job: SyncJob, log_file: Path, executable: str = "robocopy") -> MirrorResult:
    """
    Run the mirror tool synchronously and return its raw result.

    A process that starts and exits non-zero is a normal result here;
    only a failure to start raises.

    Raises:
        MirrorLaunchError: If the executable cannot be started.
    """
    cmd = build_mirror_command(job, log_file, executable)
    logger.debug(f"Running: {subprocess.list2cmdline(cmd)}")

    start = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise MirrorLaunchError(executable, e) from e
    duration = time.monotonic() - start

    result = MirrorResult(
        returncode=proc.returncode,
        stdout=(proc.stdout or "").splitlines(),
        stderr=(proc.stderr or "").splitlines(),
        duration_seconds=duration,
    )

    for line in result.stdout:
        if line.strip():
            logger.debug(f"[robocopy] {line}")
    for line in result.stderr:
        if line.strip():
            logger.debug(f"[robocopy:stderr] {line}")

    logger.info(f"Mirror tool exited with code {result.returncode} after {duration:.1f}s")
    return result
