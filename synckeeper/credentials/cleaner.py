"""
Credential Cleaner — List once, filter, delete each match.

## Usage

    from synckeeper.credentials.cleaner import clean_credentials

    report = clean_credentials(settings)
    print(report.summary())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..config.loader import Settings
from .cmdkey import delete_credential, list_credentials
from .matching import select_candidates

logger = logging.getLogger(__name__)


class CleanupOutcome(str, Enum):
    """How a cleanup pass ended."""
    NO_CREDENTIALS = "no_credentials"   # listing came back empty
    NO_MATCHES = "no_matches"           # nothing matched the target pattern
    ALL_FILTERED = "all_filtered"       # matches existed, filter removed them all
    COMPLETED = "completed"             # deletions attempted


@dataclass
class CleanupReport:
    """Per-run tally of a cleanup pass."""

    outcome: CleanupOutcome
    lines: int = 0
    matched: List[str] = field(default_factory=list)
    candidates: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    dry_run: bool = False
    filter_pattern: Optional[str] = None

    @property
    def filtered_out(self) -> int:
        return len(self.matched) - len(self.candidates)

    def summary(self) -> str:
        if self.outcome == CleanupOutcome.NO_CREDENTIALS:
            return "No stored credentials found."
        if self.outcome == CleanupOutcome.NO_MATCHES:
            return f"No credential entries matched the target pattern ({self.lines} line(s) scanned)."
        if self.outcome == CleanupOutcome.ALL_FILTERED:
            return (
                f"{len(self.matched)} credential(s) matched, "
                f"but none passed the filter '{self.filter_pattern}'."
            )
        if self.dry_run:
            return f"Dry run: {len(self.candidates)} credential(s) would be deleted."
        return (
            f"Deleted {len(self.deleted)} of {len(self.candidates)} credential(s)"
            f"; {len(self.failed)} failed, {self.filtered_out} filtered out."
        )

    def to_dict(self) -> Dict:
        return {
            "outcome": self.outcome.value,
            "lines": self.lines,
            "matched": self.matched,
            "candidates": self.candidates,
            "deleted": self.deleted,
            "failed": self.failed,
            "dry_run": self.dry_run,
        }


def clean_credentials(
    settings: Optional[Settings] = None,
    pattern: Optional[str] = None,
    filter_pattern: Optional[str] = None,
    dry_run: bool = False,
) -> CleanupReport:
    """
    Run one cleanup pass.

    Explicit pattern/filter arguments override the settings.

    Raises:
        CredentialListingError: If the listing command fails.
        ValidationError: If the pattern is not a usable regex.
    """
    settings = settings or Settings()
    pattern = pattern or settings.credential_pattern
    filter_pattern = filter_pattern if filter_pattern is not None else settings.credential_filter

    lines = list_credentials(settings.cmdkey_exe)
    if not any(line.strip() for line in lines):
        logger.info("Credential listing is empty")
        return CleanupReport(outcome=CleanupOutcome.NO_CREDENTIALS, dry_run=dry_run,
                             filter_pattern=filter_pattern)

    matched, candidates = select_candidates(lines, pattern, filter_pattern)
    report = CleanupReport(
        outcome=CleanupOutcome.COMPLETED,
        lines=len(lines),
        matched=matched,
        candidates=candidates,
        dry_run=dry_run,
        filter_pattern=filter_pattern,
    )

    if not matched:
        report.outcome = CleanupOutcome.NO_MATCHES
        return report
    if not candidates:
        report.outcome = CleanupOutcome.ALL_FILTERED
        return report

    logger.info(f"{len(candidates)} credential(s) selected for deletion")

    for name in candidates:
        if dry_run:
            logger.info(f"[dry-run] Would delete {name}")
            continue
        if delete_credential(name, settings.cmdkey_exe):
            report.deleted.append(name)
            logger.info(f"Deleted {name}")
        else:
            report.failed.append(name)

    return report
