"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..db import UserProfileRepository, get_db_path
from ..models.user_profile import UserProfile


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'regain init' first."
        )
        ctx.exit(1)


async def load_profile(ctx: click.Context, profile_id: int | None) -> UserProfile:
    """Load the given profile, or the most recent one when no ID is given."""
    repo = UserProfileRepository()
    if profile_id is not None:
        profile = await repo.get(profile_id)
    else:
        profile = await repo.get_latest()

    if profile is None:
        if profile_id is not None:
            echo_error(f"Profile {profile_id} not found.")
        else:
            echo_error("No profile found. Run 'regain profile create' first.")
        ctx.exit(1)
    return profile


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
