"""Initialize project command."""

import click

from ..config import get_settings
from ..data.catalog_loader import get_catalog_json_path, seed_catalog_from_json
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success, echo_warning


@click.command()
@async_command
async def init():
    """Initialize the regain data directory and database.

    This creates the data directory, initializes the SQLite database with
    the required schema and loads the exercise catalog.
    """
    data_dir = get_settings().data_dir
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing regain in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    json_path = get_catalog_json_path()
    if json_path.exists():
        count = await seed_catalog_from_json(db_path, json_path)
        echo_success(f"Exercise catalog populated ({count} exercises from {json_path.name})")
    else:
        echo_warning(f"No catalog file at {json_path}; plans need a catalog in the store")

    click.echo()
    click.echo("regain is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create your profile:")
    click.echo("     regain profile create --name Alex --discipline pilates --days 3")
    click.echo()
    click.echo("  2. Generate a week of sessions:")
    click.echo("     regain plan generate")
