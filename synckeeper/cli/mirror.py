"""
CLI mirror commands — run one job, run a job file, explain an exit code.

Usage:
    synckeeper mirror --source-path \\\\SrvA\\Data --destination-path D:\\Mirror \\
        --log-base-path C:\\Logs [--robocopy-threads 8] [--max-log-files-to-keep 5]
    synckeeper run-jobs --config jobs.yaml
    synckeeper classify 10
"""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError as PydanticValidationError

from ..validation import (
    MAX_LOGS_TO_KEEP,
    MAX_THREADS,
    MIN_LOGS_TO_KEEP,
    MIN_THREADS,
    ConfigurationError,
)

SEVERITY_COLORS = {
    "info": "green",
    "warning": "yellow",
    "error": "red",
    "fatal": "magenta",
}


def _echo_outcome(outcome) -> None:
    """Print one run's result line."""
    classification = outcome.classification
    color = SEVERITY_COLORS.get(classification.severity.value, "white")
    click.secho(
        f"[{classification.code}] {outcome.job.display_name}: {classification.status}",
        fg=color,
        bold=classification.severity.value != "info",
    )
    click.echo(f"    Log: {outcome.paths.log_file}")
    if outcome.deleted_logs:
        click.echo(f"    Rotated out {len(outcome.deleted_logs)} old log(s)")


@click.command("mirror")
@click.option("--source-path", "--sourcePath", "source_path", required=True,
              help="Directory to mirror from")
@click.option("--destination-path", "--destinationPath", "destination_path", required=True,
              help="Directory to mirror into (extraneous entries are deleted)")
@click.option("--log-base-path", "--logBasePath", "log_base_path", required=True,
              help="Base directory for per-job log folders")
@click.option("--robocopy-threads", "--robocopyThreads", "threads",
              type=click.IntRange(MIN_THREADS, MAX_THREADS), default=8, show_default=True,
              help="Thread count passed to robocopy /MT")
@click.option("--max-log-files-to-keep", "--maxLogFilesToKeep", "max_logs",
              type=click.IntRange(MIN_LOGS_TO_KEEP, MAX_LOGS_TO_KEEP), default=5,
              show_default=True, help="Run logs retained per job pair")
@click.option("--append-log", is_flag=True, help="Append robocopy output instead of overwriting")
@click.pass_context
def mirror(
    ctx: click.Context,
    source_path: str,
    destination_path: str,
    log_base_path: str,
    threads: int,
    max_logs: int,
    append_log: bool,
) -> None:
    """Mirror SOURCE to DESTINATION with robocopy and manage its logs."""
    from ..mirror.models import SyncJob
    from ..mirror.runner import run_sync_job

    try:
        job = SyncJob(
            source_path=source_path,
            destination_path=destination_path,
            log_base_path=log_base_path,
            threads=threads,
            max_logs=max_logs,
            append_log=append_log,
        )
    except PydanticValidationError as e:
        raise click.BadParameter(str(e))

    outcome = run_sync_job(job, ctx.obj["settings"])
    _echo_outcome(outcome)
    raise SystemExit(outcome.exit_code)


@click.command("run-jobs")
@click.option("--config", "config_path", required=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help="YAML file listing job pairs")
@click.pass_context
def run_jobs_cmd(ctx: click.Context, config_path: Path) -> None:
    """Run every job in a job file, one after another."""
    from ..config.loader import load_job_file
    from ..mirror.models import SyncJob
    from ..mirror.runner import combined_exit_code, run_jobs

    try:
        job_file = load_job_file(config_path)
        jobs = [SyncJob(**entry) for entry in job_file.resolved()]
    except ConfigurationError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise SystemExit(2)
    except PydanticValidationError as e:
        click.secho(f"❌ Invalid job in {config_path}: {e}", fg="red", err=True)
        raise SystemExit(2)

    if not jobs:
        click.echo("No jobs to run.")
        return

    outcomes = run_jobs(jobs, ctx.obj["settings"])
    for outcome in outcomes:
        _echo_outcome(outcome)

    code = combined_exit_code(outcomes)
    click.echo()
    click.echo(f"{len(outcomes)} job(s) run, highest exit code {code}")
    raise SystemExit(code)


@click.command("classify")
@click.argument("code", type=int)
def classify(code: int) -> None:
    """Explain what a mirror exit CODE means."""
    from ..mirror.exit_codes import classify_exit

    classification = classify_exit(code)
    color = SEVERITY_COLORS.get(classification.severity.value, "white")
    click.secho(f"{classification.severity.value.upper()}: {classification.status}", fg=color)
