"""Progress tracking commands."""

from datetime import date, datetime

import click

from ..data.catalog_loader import load_catalog
from ..db import CompletedSessionRepository, TrainingSystemRepository
from ..exceptions import CatalogUnavailableError, RegainError
from ..services.completion import CompletionService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    load_profile,
)


@click.group()
def progress():
    """Track completed sessions and streaks.

    Mark sessions as complete, view your streak and rebuild your best
    streak from history.
    """
    pass


@progress.command("complete")
@click.argument("session_id")
@click.option(
    "--date",
    "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Completion date (default: today)",
)
@click.option("--duration", type=int, default=0, help="Session length in minutes")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def complete(
    ctx: click.Context,
    session_id: str,
    on_date: datetime | None,
    duration: int,
    profile_id: int | None,
):
    """Mark a planned session as complete."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    system = await TrainingSystemRepository().get_active(user.id)
    session = system.get_session(session_id) if system else None
    if session is None:
        echo_error(f"Session {session_id} not found.")
        ctx.exit(1)

    if session.completed:
        echo_warning("Session was already completed; recording it again.")

    try:
        exercises = await load_catalog()
    except CatalogUnavailableError:
        echo_warning("Catalog unavailable, metrics summary skipped.")
        exercises = None

    try:
        result = await CompletionService().complete_session(
            user.id,
            session,
            completed_on=on_date.date() if on_date else date.today(),
            exercises=exercises,
            duration_seconds=duration * 60,
        )
    except RegainError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Completed session on {result.completed_session.date.isoformat()}")
    click.echo(f"Current streak: {result.streak.current_streak}")
    click.echo(f"Best streak: {result.streak.longest_streak}")
    click.echo(f"Total sessions: {result.streak.total_sessions}")
    for exercise_id in result.advanced:
        echo_info(f"Milestone reached on {exercise_id}: next session moves up a level")


@progress.command("streak")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def streak(ctx: click.Context, profile_id: int | None):
    """Show streak counters and recent history."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    state = user.streak

    click.echo()
    click.echo(click.style(f"Streak for {user.name}", bold=True))
    click.echo("=" * 40)
    click.echo(f"Current streak: {state.current_streak}")
    click.echo(f"Best streak: {state.longest_streak if state.longest_streak is not None else '-'}")
    click.echo(f"Total sessions: {state.total_sessions}")
    if state.last_session_date:
        click.echo(f"Last session: {state.last_session_date.isoformat()}")

    rating = await CompletionService().rating(user.id)
    click.echo(
        f"Rating: mobility {rating['mobility']}, rotation {rating['rotation']}, "
        f"flexibility {rating['flexibility']}"
    )

    recent = await CompletedSessionRepository().list_recent(user.id, limit=10)
    if recent:
        click.echo()
        rows = [
            [s.date.isoformat(), s.discipline.display_name, s.framework,
             str(len(s.performed_variations()))]
            for s in recent
        ]
        click.echo(format_table(["Date", "Discipline", "Framework", "Exercises"], rows))


@progress.command("backfill")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def backfill(ctx: click.Context, profile_id: int | None):
    """Rebuild the best streak from the full completion history."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    previous = user.streak.longest_streak
    state = await CompletionService().backfill_longest_streak(user.id)

    if previous == state.longest_streak:
        echo_info(f"Best streak unchanged at {state.longest_streak}")
    else:
        echo_success(f"Best streak set to {state.longest_streak}")
