"""
Mirror Models — Job definition, derived paths and exit classification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..validation import MAX_LOGS_TO_KEEP, MAX_THREADS, MIN_LOGS_TO_KEEP, MIN_THREADS

# Exit codes reserved by the wrapper itself
EXIT_LAUNCH_FAILED = 97
EXIT_LOG_DIR_FAILED = 99


class SyncJob(BaseModel):
    """
    One mirroring run: a job pair plus its run settings.

    Immutable once created; started_at pins the run's log file name.
    """

    model_config = ConfigDict(frozen=True)

    source_path: str
    destination_path: str
    log_base_path: str
    threads: int = Field(default=8, ge=MIN_THREADS, le=MAX_THREADS)
    max_logs: int = Field(default=5, ge=MIN_LOGS_TO_KEEP, le=MAX_LOGS_TO_KEEP)
    append_log: bool = False
    started_at: datetime = Field(default_factory=datetime.now)

    @field_validator("source_path", "destination_path", "log_base_path")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @property
    def display_name(self) -> str:
        return f"{self.source_path} -> {self.destination_path}"


@dataclass(frozen=True)
class LogPaths:
    """Where one run writes its log."""

    log_directory: Path
    log_file: Path


@dataclass
class MirrorResult:
    """Raw outcome of one external mirror process."""

    returncode: int
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0


class Severity(str, Enum):
    """How loudly an exit code should be reported."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


@dataclass(frozen=True)
class ExitClassification:
    """Human-readable meaning of a mirror exit code."""

    code: int
    status: str
    severity: Severity

    @property
    def is_success(self) -> bool:
        return self.severity == Severity.INFO
