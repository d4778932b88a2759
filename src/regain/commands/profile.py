"""User profile commands."""

import click

from ..db import UserProfileRepository
from ..models.exercises import Discipline
from ..models.user_profile import UserProfile
from .base import async_command, echo_error, echo_success, ensure_initialized, load_profile

DISCIPLINE_CHOICES = [d.value for d in Discipline]


@click.group()
def profile():
    """Manage your training profile."""
    pass


@profile.command("create")
@click.option("--name", "-n", required=True, help="Your name")
@click.option(
    "--discipline",
    "-d",
    "disciplines",
    multiple=True,
    type=click.Choice(DISCIPLINE_CHOICES, case_sensitive=False),
    help="Preferred discipline (repeatable)",
)
@click.option("--discomfort", "discomforts", multiple=True, help="Muscle to avoid loading (repeatable)")
@click.option("--equipment", "-e", multiple=True, help="Available equipment (repeatable)")
@click.option("--days", default=3, type=click.IntRange(1, 7), help="Training days per week")
@click.pass_context
@async_command
async def create(
    ctx: click.Context,
    name: str,
    disciplines: tuple[str, ...],
    discomforts: tuple[str, ...],
    equipment: tuple[str, ...],
    days: int,
):
    """Create a new profile."""
    ensure_initialized(ctx)

    try:
        parsed = [Discipline.parse(d) for d in disciplines]
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)

    new_profile = UserProfile(
        name=name,
        preferred_disciplines=parsed,
        discomforts=[d.strip().lower() for d in discomforts],
        equipment=[e.strip().lower() for e in equipment],
        days_per_week=days,
    )
    profile_id = await UserProfileRepository().create(new_profile)
    echo_success(f"Created profile {profile_id} for {name}")


@profile.command("show")
@click.option("--profile-id", type=int, default=None, help="Profile ID (default: latest)")
@click.pass_context
@async_command
async def show(ctx: click.Context, profile_id: int | None):
    """Show a profile."""
    ensure_initialized(ctx)

    user = await load_profile(ctx, profile_id)
    click.echo()
    click.echo(click.style(f"Profile {user.id}", bold=True))
    click.echo("=" * 40)
    click.echo(user.get_summary())
