"""
Credential Matching — Pick deletion candidates out of a cmdkey listing.

Extraction is best-effort text parsing: the listing format is
locale-dependent and not a stable contract.
"""

from __future__ import annotations

import fnmatch
import re
from typing import Iterable, List, Optional, Tuple, Union

from ..config.loader import DEFAULT_TARGET_PATTERN
from ..validation import validate_pattern

PatternLike = Union[str, re.Pattern]


def _compile(pattern: PatternLike) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    return validate_pattern(pattern)


def extract_target(line: str, pattern: PatternLike = DEFAULT_TARGET_PATTERN) -> Optional[str]:
    """
    Return the trimmed capture of `pattern` in `line`, or None.

    Matching is case-insensitive. An empty capture counts as no match.
    """
    match = _compile(pattern).search(line)
    if not match:
        return None
    target = (match.group(1) or "").strip()
    return target or None


def passes_filter(name: str, filter_pattern: Optional[str]) -> bool:
    """
    Case-insensitive wildcard containment test.

    With no filter configured every name passes.
    """
    if not filter_pattern:
        return True
    return fnmatch.fnmatchcase(name.lower(), f"*{filter_pattern.lower()}*")


def select_candidates(
    lines: Iterable[str],
    pattern: PatternLike = DEFAULT_TARGET_PATTERN,
    filter_pattern: Optional[str] = None,
) -> Tuple[List[str], List[str]]:
    """
    Extract, de-duplicate and filter targets in listing order.

    Returns:
        (matched, candidates): every distinct target that matched the
        pattern, and the subset that also passes the filter.
    """
    compiled = _compile(pattern)
    matched: List[str] = []
    seen = set()
    for line in lines:
        target = extract_target(line, compiled)
        if target is None or target in seen:
            continue
        seen.add(target)
        matched.append(target)

    candidates = [name for name in matched if passes_filter(name, filter_pattern)]
    return matched, candidates
