"""Command-line entry point for HabitVault."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.user import User
from .services.backup import OperationResult
from .services.progress import ProgressTracker


def _echo_result(result: OperationResult) -> None:
    note = result.notification
    click.echo(f"{note.title}: {note.description}", err=note.is_error)


def _run_with_progress(tracker: ProgressTracker, label: str, action):
    """Drive a click progress bar from the tracker while ``action`` runs."""

    with click.progressbar(length=100, label=label) as bar:

        def _on_progress(value: int) -> None:
            if value > bar.pos:
                bar.update(value - bar.pos)

        unsubscribe = tracker.subscribe(_on_progress)
        try:
            return action()
        finally:
            unsubscribe()


def _user_for(app: AppContext, email: Optional[str]) -> Optional[User]:
    if not email:
        return None
    user = app.user_repo.get_by_email(email)
    app.current_user = user
    return user


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Back up and restore habit data."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config)


@main.command("create-user")
@click.argument("email")
@click.option("--display-name", default=None, help="Name shown on the profile")
@click.option("--timezone", "tz", default=None, help="IANA timezone, e.g. Europe/Berlin")
@click.pass_obj
def create_user(app: AppContext, email: str, display_name: Optional[str], tz: Optional[str]) -> None:
    """Create an account to export from or import into."""

    if app.user_repo.get_by_email(email) is not None:
        raise click.ClickException(f"An account for {email} already exists.")
    user = app.user_repo.create(User(email=email, display_name=display_name, timezone=tz))
    click.echo(f"Created account {user.email} ({user.id})")


@main.command("export")
@click.option("--email", required=True, help="Account to export")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "csv"]),
    default="json",
    show_default=True,
    help="json is a restorable backup; csv is for spreadsheets",
)
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to write into (defaults to HABITVAULT_EXPORT_DIR)",
)
@click.pass_obj
def export_cmd(app: AppContext, email: str, fmt: str, output_dir: Optional[Path]) -> None:
    """Export an account's habits, completions, streaks and settings."""

    service = app.backup_service
    user = _user_for(app, email)
    action = service.export_json if fmt == "json" else service.export_csv
    result = _run_with_progress(
        service.export_progress, "Exporting", lambda: action(user, output_dir)
    )
    _echo_result(result)
    for path in result.paths:
        click.echo(f"  {path}")
    if not result.ok:
        click.get_current_context().exit(1)


@main.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--email", required=True, help="Account to import into")
@click.pass_obj
def import_cmd(app: AppContext, backup_file: Path, email: str) -> None:
    """Import a JSON backup into an account. Records get new ids."""

    service = app.backup_service
    user = _user_for(app, email)
    result = _run_with_progress(
        service.import_progress, "Importing", lambda: service.import_json(user, backup_file)
    )
    _echo_result(result)
    if result.summary is not None:
        for phase in result.summary.phases():
            click.echo(
                f"  {phase.name}: {phase.imported}/{phase.attempted} imported"
                + (f", {len(phase.skipped)} skipped" if phase.skipped else "")
            )
    if not result.ok:
        click.get_current_context().exit(1)


@main.command("stats")
@click.option("--email", required=True, help="Account to inspect")
@click.pass_obj
def stats_cmd(app: AppContext, email: str) -> None:
    """Show record counts and when the account was last backed up."""

    user = _user_for(app, email)
    if user is None:
        raise click.ClickException("You must be logged in to view backup stats.")
    stats = app.backup_service.backup_stats(user)
    if stats is None:
        raise click.ClickException("Could not load backup stats.")
    click.echo(f"Habits: {stats.habits}")
    click.echo(f"Completions: {stats.completions}")
    click.echo(f"Last backup: {stats.last_backup or 'never'}")


if __name__ == "__main__":  # pragma: no cover
    main()
