"""
CLI credential commands — remove stored credentials by target pattern.

Usage:
    synckeeper clean-credentials [--filter TEXT] [--pattern REGEX] [--dry-run] [--json]
"""

from __future__ import annotations

import click


@click.command("clean-credentials")
@click.option("--filter", "filter_pattern", default=None,
              help="Only delete targets containing this wildcard text (case-insensitive)")
@click.option("--pattern", default=None,
              help="Regex with one capture group selecting the target name")
@click.option("--dry-run", is_flag=True, help="List what would be deleted without deleting")
@click.option("--json", "as_json", is_flag=True, help="Output the report as JSON")
@click.pass_context
def clean_credentials_cmd(
    ctx: click.Context,
    filter_pattern: str | None,
    pattern: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Delete stored credentials whose target matches the pattern."""
    from ..credentials.cleaner import CleanupOutcome, clean_credentials
    from ..credentials.cmdkey import CredentialListingError
    from ..validation import ValidationError

    try:
        report = clean_credentials(
            ctx.obj["settings"],
            pattern=pattern,
            filter_pattern=filter_pattern,
            dry_run=dry_run,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--pattern")
    except CredentialListingError as e:
        click.secho(f"❌ Credential listing failed: {e}", fg="red", err=True)
        raise SystemExit(1)

    if as_json:
        import json
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.outcome == CleanupOutcome.COMPLETED:
        for name in report.candidates:
            if dry_run:
                click.echo(f"  • {name}")
            elif name in report.deleted:
                click.secho(f"  ✓ {name}", fg="green")
            else:
                click.secho(f"  ✗ {name}", fg="red")
        click.echo()

    color = "yellow" if report.failed else "green"
    click.secho(report.summary(), fg=color)
