"""Training plan commands."""

import random
from datetime import date, datetime

import click

from ..config import get_settings
from ..data.catalog_loader import load_catalog
from ..db import TrainingSystemRepository
from ..exceptions import CatalogUnavailableError, SessionNotFoundError
from ..models.training import Phase, Session, TrainingFramework
from ..services.alternatives import find_alternative_variations
from ..services.session_builder import SessionBuilder, swap_variation
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    load_profile,
)

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])
FRAMEWORK_CHOICES = [f.value for f in TrainingFramework]
PHASE_CHOICES = [p.value for p in Phase]


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def echo_session(session: Session) -> None:
    """Print a session with its phases."""
    when = session.date.isoformat() if session.date else "unscheduled"
    status = " [done]" if session.completed else ""
    moved = " (moved)" if session.moved else ""
    click.echo(
        click.style(
            f"{when}: {session.discipline.display_name} - {session.framework}{moved}{status}",
            bold=True,
        )
    )
    if session.id:
        click.echo(f"  Session: {session.id}")
    for phase in Phase:
        planned = session.phases.get(phase, [])
        click.echo(f"  {phase.value.title()}:")
        if not planned:
            click.echo("    (none)")
        for pv in planned:
            click.echo(
                f"    - {pv.exercise_name}: {pv.variation_name} "
                f"[{pv.exercise_id}] difficulty {pv.difficulty_score:g}"
            )


@click.group()
def plan():
    """Generate and view training plans."""
    pass


@plan.command("generate")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.option("--start", type=DATE_TYPE, default=None, help="First day of the plan (YYYY-MM-DD)")
@click.option(
    "--framework",
    "-f",
    type=click.Choice(FRAMEWORK_CHOICES, case_sensitive=False),
    default=TrainingFramework.PUSH_PULL.value,
    help="Muscle-group rotation",
)
@click.option("--days", type=click.IntRange(1, 7), default=None, help="Override days per week")
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible plan")
@click.pass_context
@async_command
async def generate(
    ctx: click.Context,
    profile_id: int | None,
    start: datetime | None,
    framework: str,
    days: int | None,
    seed: int | None,
):
    """Generate a week of sessions for a profile."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    try:
        exercises = await load_catalog()
    except CatalogUnavailableError as e:
        echo_error(f"No plan could be generated: {e}")
        ctx.exit(1)

    repo = TrainingSystemRepository()
    previous = await repo.get_active(user.id)

    builder = SessionBuilder(
        exercises,
        user,
        phase_counts=get_settings().phase_counts,
        rng=random.Random(seed) if seed is not None else None,
    )
    system = builder.build_training_system(
        start_date=_as_date(start) or date.today(),
        days_per_week=days,
        framework=framework,
        previous_sessions=previous.sessions if previous else None,
    )
    system.profile_id = user.id
    system.id = await repo.create(system)

    echo_success(f"Generated training system {system.id} with {len(system.sessions)} sessions")
    click.echo()
    for session in system.sessions:
        echo_session(session)
        click.echo()


@plan.command("show")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.option("--date", "on_date", type=DATE_TYPE, default=None, help="Show the session for a date")
@click.pass_context
@async_command
async def show(ctx: click.Context, profile_id: int | None, on_date: datetime | None):
    """Show the active training system."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    system = await TrainingSystemRepository().get_active(user.id)
    if system is None:
        echo_info("No training system yet. Run 'regain plan generate'.")
        return

    if on_date is not None:
        session = system.session_for_date(on_date.date())
        if session is None:
            echo_info(f"No session on {on_date.date().isoformat()}.")
            return
        echo_session(session)
        return

    headers = ["Session", "Date", "Discipline", "Framework", "Exercises", "Status"]
    rows = []
    for session in system.sessions:
        rows.append([
            session.id or "",
            session.date.isoformat() if session.date else "-",
            session.discipline.display_name,
            session.framework,
            str(len(session.all_variations())),
            "done" if session.completed else ("moved" if session.moved else ""),
        ])
    click.echo(format_table(headers, rows))


@plan.command("move")
@click.argument("session_id")
@click.argument("new_date", type=DATE_TYPE)
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def move(ctx: click.Context, session_id: str, new_date: datetime, profile_id: int | None):
    """Reschedule one session to another date."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    repo = TrainingSystemRepository()
    system = await repo.get_active(user.id)
    if system is None:
        echo_error("No training system yet. Run 'regain plan generate'.")
        ctx.exit(1)

    try:
        session = system.reschedule_session(session_id, new_date.date())
    except SessionNotFoundError as e:
        echo_error(str(e))
        ctx.exit(1)

    await repo.update(system)
    echo_success(f"Moved session {session.id} to {session.date.isoformat()}")


@plan.command("swap")
@click.argument("session_id")
@click.argument("exercise_id")
@click.option(
    "--phase",
    type=click.Choice(PHASE_CHOICES, case_sensitive=False),
    default=Phase.WORKOUT.value,
    help="Phase holding the exercise",
)
@click.option("--pick", type=click.IntRange(1, 3), default=None, help="Apply alternative number N")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def swap(
    ctx: click.Context,
    session_id: str,
    exercise_id: str,
    phase: str,
    pick: int | None,
    profile_id: int | None,
):
    """List alternatives for a planned exercise, or swap one in with --pick."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    repo = TrainingSystemRepository()
    system = await repo.get_active(user.id)
    session = system.get_session(session_id) if system else None
    if session is None:
        echo_error(f"Session {session_id} not found.")
        ctx.exit(1)

    phase = Phase(phase)
    current = next(
        (pv for pv in session.phases[phase] if pv.exercise_id == exercise_id), None
    )
    if current is None:
        echo_error(f"Exercise {exercise_id} is not in the {phase.value} phase.")
        ctx.exit(1)

    try:
        exercises = await load_catalog()
    except CatalogUnavailableError as e:
        echo_error(str(e))
        ctx.exit(1)

    alternatives = find_alternative_variations(current, exercises, phase)
    if not alternatives:
        echo_info(f"No alternatives found for {current.variation_name}.")
        return

    if pick is None:
        rows = [
            [str(i), alt.exercise_name, alt.variation_name, f"{alt.difficulty_score:g}",
             alt.bilaterality.value, alt.progression_type.value]
            for i, alt in enumerate(alternatives, start=1)
        ]
        click.echo(format_table(
            ["#", "Exercise", "Variation", "Difficulty", "Sides", "Progression"], rows
        ))
        click.echo()
        click.echo(f"Apply one with: regain plan swap {session_id} {exercise_id} --pick N")
        return

    if pick > len(alternatives):
        echo_error(f"Only {len(alternatives)} alternatives available.")
        ctx.exit(1)

    replacement = alternatives[pick - 1]
    swap_variation(session, phase, exercise_id, replacement)
    await repo.update(system)
    echo_success(
        f"Swapped {current.variation_name} for {replacement.variation_name} "
        f"({replacement.exercise_name})"
    )
