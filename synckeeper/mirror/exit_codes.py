"""
Exit Codes — Classify robocopy's exit code.

robocopy reports a bit field:
    1   one or more files were copied
    2   extra files or directories were detected (and purged under /MIR)
    4   mismatched files or directories were detected
    8   some files or directories could not be copied
    16  serious error, nothing was copied

Codes 97 and 99 never come from robocopy; the wrapper uses them for its
own fatal conditions.
"""

from __future__ import annotations

from .models import EXIT_LAUNCH_FAILED, EXIT_LOG_DIR_FAILED, ExitClassification, Severity

_SUCCESS_BITS = (
    (1, "files copied"),
    (2, "extra entries purged"),
    (4, "mismatched entries detected"),
)


def _success_status(code: int) -> str:
    if code == 0:
        return "Success: no changes, source and destination already in sync"
    parts = [text for bit, text in _SUCCESS_BITS if code & bit]
    return "Success: " + ", ".join(parts)


def classify_exit(code: int) -> ExitClassification:
    """
    Map an exit code to a status text and severity.

    Reserved wrapper codes take precedence over robocopy's error band.
    """
    if code == EXIT_LAUNCH_FAILED:
        return ExitClassification(code, "Fatal: could not launch the mirror tool", Severity.FATAL)
    if code == EXIT_LOG_DIR_FAILED:
        return ExitClassification(code, "Fatal: could not create the log directory", Severity.FATAL)
    if 0 <= code <= 7:
        return ExitClassification(code, _success_status(code), Severity.INFO)
    if 8 <= code <= 15:
        return ExitClassification(
            code, "Warning: some files or directories could not be copied", Severity.WARNING
        )
    if code >= 16:
        return ExitClassification(
            code, "Error: serious failure, the mirror tool copied nothing", Severity.ERROR
        )
    return ExitClassification(code, f"Error: unexpected exit code {code}", Severity.ERROR)
