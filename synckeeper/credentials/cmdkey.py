"""
cmdkey — List and delete Windows stored credentials.

The listing is locale-dependent free text; callers treat it as raw lines.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List

logger = logging.getLogger(__name__)


class CredentialListingError(Exception):
    """Raised when the credential listing command fails."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


def _cmdkey(executable: str, *args: str) -> subprocess.CompletedProcess:
    """Run cmdkey with the given arguments."""
    cmd = [executable] + list(args)
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        errors="replace",
    )


def list_credentials(executable: str = "cmdkey") -> List[str]:
    """
    Return the raw lines of `cmdkey /list`.

    An empty list is a normal result.

    Raises:
        CredentialListingError: If cmdkey cannot start or exits non-zero.
    """
    try:
        result = _cmdkey(executable, "/list")
    except OSError as e:
        raise CredentialListingError(f"Cannot launch {executable}: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise CredentialListingError(
            f"{executable} /list exited {result.returncode}: {stderr or 'no error output'}",
            returncode=result.returncode,
            stderr=stderr,
        )

    lines = (result.stdout or "").splitlines()
    logger.debug(f"{executable} /list returned {len(lines)} line(s)")
    return lines


def delete_credential(name: str, executable: str = "cmdkey") -> bool:
    """
    Delete one stored credential by target name.

    Returns:
        True if cmdkey reported success. Failures are logged, not raised.
    """
    try:
        result = _cmdkey(executable, f"/delete:{name}")
    except OSError as e:
        logger.error(f"Cannot launch {executable} to delete {name}: {e}")
        return False

    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        logger.error(f"Failed to delete {name} (exit {result.returncode}): {detail}")
        return False

    return True
