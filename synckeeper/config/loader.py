"""
Config Loader — Runtime settings from the environment and YAML job files.

Settings come from environment variables (a .env file in the working
directory is loaded by the CLI before anything reads them):

    SYNCKEEPER_ROBOCOPY=robocopy
    SYNCKEEPER_CMDKEY=cmdkey
    SYNCKEEPER_CREDENTIAL_PATTERN=target=(.*)
    SYNCKEEPER_CREDENTIAL_FILTER=*contoso*

Job files describe several mirror job pairs to run in one invocation:

    defaults:
      log_base_path: C:\\Logs
      threads: 16
    jobs:
      - source_path: \\\\SrvA\\Data
        destination_path: D:\\Mirror
      - source_path: \\\\SrvA\\Home
        destination_path: D:\\HomeMirror
        max_logs: 10
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from ..validation import (
    ConfigurationError,
    MAX_LOGS_TO_KEEP,
    MAX_THREADS,
    MIN_LOGS_TO_KEEP,
    MIN_THREADS,
)

logger = logging.getLogger(__name__)

DEFAULT_ROBOCOPY = "robocopy"
DEFAULT_CMDKEY = "cmdkey"

# Lines such as "    Target: LegacyGeneric:target=user@host"
DEFAULT_TARGET_PATTERN = r"target=(.*)"
# No filter: every matched target is a deletion candidate
DEFAULT_FILTER: Optional[str] = None

DEFAULT_THREADS = 8
DEFAULT_MAX_LOGS = 5


@dataclass(frozen=True)
class Settings:
    """External tool locations and credential-cleaner configuration."""

    robocopy_exe: str = DEFAULT_ROBOCOPY
    cmdkey_exe: str = DEFAULT_CMDKEY
    credential_pattern: str = DEFAULT_TARGET_PATTERN
    credential_filter: Optional[str] = DEFAULT_FILTER

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from SYNCKEEPER_* environment variables."""
        credential_filter = os.environ.get("SYNCKEEPER_CREDENTIAL_FILTER", "").strip()
        return cls(
            robocopy_exe=os.environ.get("SYNCKEEPER_ROBOCOPY", "").strip() or DEFAULT_ROBOCOPY,
            cmdkey_exe=os.environ.get("SYNCKEEPER_CMDKEY", "").strip() or DEFAULT_CMDKEY,
            credential_pattern=(
                os.environ.get("SYNCKEEPER_CREDENTIAL_PATTERN", "").strip()
                or DEFAULT_TARGET_PATTERN
            ),
            credential_filter=credential_filter or None,
        )


# --- Job file schema ---


def _strip_path(value: Optional[str], required: bool) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        if required:
            raise ValueError("must not be blank")
        return None
    return value


class JobDefaults(BaseModel):
    """Values applied to every job that does not set them itself."""

    log_base_path: Optional[str] = None
    threads: int = Field(default=DEFAULT_THREADS, ge=MIN_THREADS, le=MAX_THREADS)
    max_logs: int = Field(default=DEFAULT_MAX_LOGS, ge=MIN_LOGS_TO_KEEP, le=MAX_LOGS_TO_KEEP)
    append_log: bool = False

    @field_validator("log_base_path")
    @classmethod
    def _optional_path(cls, value: Optional[str]) -> Optional[str]:
        return _strip_path(value, required=False)


class JobEntry(BaseModel):
    """A single job pair as written in the job file."""

    source_path: str = Field(min_length=1)
    destination_path: str = Field(min_length=1)
    log_base_path: Optional[str] = None
    threads: Optional[int] = Field(default=None, ge=MIN_THREADS, le=MAX_THREADS)
    max_logs: Optional[int] = Field(default=None, ge=MIN_LOGS_TO_KEEP, le=MAX_LOGS_TO_KEEP)
    append_log: Optional[bool] = None

    @field_validator("source_path", "destination_path")
    @classmethod
    def _required_path(cls, value: str) -> str:
        return _strip_path(value, required=True)

    @field_validator("log_base_path")
    @classmethod
    def _optional_path(cls, value: Optional[str]) -> Optional[str]:
        return _strip_path(value, required=False)


class JobFile(BaseModel):
    """The jobs.yaml schema."""

    defaults: JobDefaults = Field(default_factory=JobDefaults)
    jobs: List[JobEntry] = Field(default_factory=list)

    def resolved(self) -> List[Dict[str, Any]]:
        """
        Merge defaults into each job.

        Returns plain dicts with every SyncJob field except started_at.
        Raises ConfigurationError when a job ends up without a log base path.
        """
        merged: List[Dict[str, Any]] = []
        for index, job in enumerate(self.jobs, start=1):
            log_base = job.log_base_path or self.defaults.log_base_path
            if not log_base:
                raise ConfigurationError(
                    f"Job {index} ({job.source_path}) has no log_base_path "
                    "and no default is set"
                )
            merged.append({
                "source_path": job.source_path,
                "destination_path": job.destination_path,
                "log_base_path": log_base,
                "threads": job.threads if job.threads is not None else self.defaults.threads,
                "max_logs": job.max_logs if job.max_logs is not None else self.defaults.max_logs,
                "append_log": (
                    job.append_log if job.append_log is not None else self.defaults.append_log
                ),
            })
        return merged


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_job_file(path: Path) -> JobFile:
    """
    Load and validate a job file.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not YAML,
            or does not match the schema.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Job file not found: {path}")

    try:
        data = load_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read job file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Job file {path} must contain a mapping at the top level")

    try:
        job_file = JobFile(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid job file {path}:\n{e}") from e

    if not job_file.jobs:
        logger.warning(f"Job file {path} defines no jobs")
    else:
        logger.debug(f"Loaded {len(job_file.jobs)} job(s) from {path}")

    return job_file
