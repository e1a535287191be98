"""Management commands for the barbershop scheduling backend."""

from __future__ import annotations

import logging
from typing import Optional

import click

from barbershop.core.exceptions import SchedulingError
from barbershop.db.seed import seed_sample_data
from barbershop.db.session import create_tables, get_db
from barbershop.services.booking_service import BookingService

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init-db")
def init_db() -> None:
    """Create all tables (idempotent)."""
    create_tables()
    logging.info("Database tables ready.")


@cli.command("seed")
def seed() -> None:
    """Insert sample barbers and services into empty tables."""
    create_tables()
    barbers, services = seed_sample_data()
    logging.info("Seeded %s barber(s) and %s service(s).", barbers, services)


@cli.command("slots")
@click.argument("barber_id")
@click.argument("day")
@click.option(
    "--duration",
    type=int,
    default=None,
    help="Service duration in minutes. Defaults to DEFAULT_DURATION_MINUTES.",
)
def slots(barber_id: str, day: str, duration: Optional[int]) -> None:
    """Print the free slots of BARBER_ID on DAY (YYYY-MM-DD)."""
    with get_db() as session:
        service = BookingService.from_session(session)
        try:
            free_slots = service.get_available_slots(barber_id, day, duration)
        except SchedulingError as e:
            raise click.ClickException(e.message) from e

    if not free_slots:
        click.echo("No free slots.")
        return
    for slot in free_slots:
        click.echo(f"{slot.start:%H:%M} - {slot.end:%H:%M}")


if __name__ == "__main__":
    cli()
