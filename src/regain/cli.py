"""CLI entry point for regain."""

import logging

import click

from . import __version__
from .commands import init, plan, profile, progress, serve
from .config import get_settings


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr at the configured level."""
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__, prog_name="regain")
@click.option("--verbose", "-v", is_flag=True, help="Log selection and streak decisions")
def main(verbose: bool):
    """regain: progressive-overload session planner with streak tracking.

    Example usage:

        # Initialize the database and exercise catalog
        regain init

        # Create a profile and plan a week
        regain profile create --name Alex --discipline pilates --days 3
        regain plan generate

        # Record a completed session
        regain progress complete <session-id>
        regain progress streak
    """
    configure_logging(verbose)


# Register commands
main.add_command(init)
main.add_command(profile)
main.add_command(plan)
main.add_command(progress)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
