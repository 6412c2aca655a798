import click

from menaje.infrastructure import bootstrap
from menaje.infrastructure.cli.availability_commands import availability
from menaje.infrastructure.cli.catalog_commands import (
    catalog_add,
    catalog_list,
    catalog_set_stock,
    catalog_update,
)
from menaje.infrastructure.cli.reservation_commands import (
    reservation_calendar,
    reservation_notes,
    reservation_open,
    reservation_return,
    reservation_save,
    reservation_show,
    reservation_status,
)
from menaje.infrastructure.config import settings
from menaje.infrastructure.logging_config import configure_logging
from menaje.infrastructure.persistence.database import create_tables


@click.group()
def cli() -> None:
    """Menaje — rental-item reservations and availability"""
    configure_logging(settings.log_level)


@cli.group()
def catalog() -> None:
    """Manage rentable items."""


@cli.group()
def reservation() -> None:
    """Manage event reservations."""


@cli.group()
def db() -> None:
    """Database maintenance."""


@db.command("init")
def db_init() -> None:
    """Create missing tables."""
    create_tables(bootstrap.engine())
    click.echo("Tables ready.")


# Register subcommands
catalog.add_command(catalog_add)
catalog.add_command(catalog_list)
catalog.add_command(catalog_set_stock)
catalog.add_command(catalog_update)
reservation.add_command(reservation_calendar)
reservation.add_command(reservation_notes)
reservation.add_command(reservation_open)
reservation.add_command(reservation_return)
reservation.add_command(reservation_save)
reservation.add_command(reservation_show)
reservation.add_command(reservation_status)
cli.add_command(availability)
