"""
synckeeper — CLI Entry Point

Usage:
    synckeeper mirror --source-path SRC --destination-path DST --log-base-path LOGS
    synckeeper run-jobs --config jobs.yaml
    synckeeper classify CODE
    synckeeper clean-credentials [--filter TEXT] [--dry-run]
"""

from __future__ import annotations

from dotenv import find_dotenv, load_dotenv

import click

from .cli.credentials import clean_credentials_cmd
from .cli.mirror import classify, mirror, run_jobs_cmd
from .config.loader import Settings
from .logging_config import setup_logging


@click.group()
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Console log level (default: LOG_LEVEL env var or INFO)")
@click.option("--log-format", default=None, type=click.Choice(["text", "json"]),
              help="Console log format (default: LOG_FORMAT env var or text)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """synckeeper — scheduled mirroring and credential cleanup."""
    # .env from the working directory, without overriding the real environment
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)

    setup_logging(level=log_level, format_type=log_format)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env()


cli.add_command(mirror)
cli.add_command(run_jobs_cmd)
cli.add_command(classify)
cli.add_command(clean_credentials_cmd)


if __name__ == "__main__":
    cli()
