"""
Validation — Input validation and error types.

Shared error types, numeric limits and pattern validation.

## Usage

    from synckeeper.validation import validate_pattern, ValidationError

    try:
        regex = validate_pattern(raw_pattern)
    except ValidationError as e:
        print(f"Validation failed: {e}")
"""

from __future__ import annotations

import re
from typing import Dict, Optional

MIN_THREADS = 1
MAX_THREADS = 128
MIN_LOGS_TO_KEEP = 1
MAX_LOGS_TO_KEEP = 100


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


def validate_pattern(pattern: str) -> re.Pattern:
    """
    Compile a credential-matching pattern.

    The pattern must compile and contain at least one capture group,
    whose text becomes the credential target.
    """
    try:
        compiled = re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise ValidationError(f"invalid regular expression: {e}", field="pattern")
    if compiled.groups < 1:
        raise ValidationError("must contain a capture group", field="pattern")
    return compiled
