#!/usr/bin/env python3
"""
Tufo operator CLI

Imports, maintenance and setup for the climbing catalog.

Usage:
    tufo init-db
    tufo import-area "Barton Creek Greenbelt" [--state Texas] [--strict]
    tufo import-all-states [--include-trad]
    tufo fix-states
    tufo delete-area "Barton Creek Greenbelt"
    tufo reset --yes
    tufo seed
"""
import json
import signal
import threading
import click
import structlog
from datetime import datetime

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


def _echo_result(result):
    click.echo(json.dumps(result.to_dict(), indent=2))
    if not result.success:
        raise SystemExit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose):
    """Tufo catalog jobs CLI."""
    import logging
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )


@cli.command()
def init_db():
    """Initialize database tables."""
    from tufo.db import init_db as _init_db

    log.info("Initializing database tables")
    _init_db()
    log.info("Database initialized")


@cli.command()
@click.argument("area_name")
@click.option("--state", "-s", default=None, help="State to file the imported areas under")
@click.option("--strict", is_flag=True, help="Sport and boulder only (skip trad)")
def import_area(area_name, state, strict):
    """Import an OpenBeta area with its sub-areas, walls and climbs."""
    from tufo.clients import OpenBetaClient
    from tufo.db import session_scope
    from tufo.services import OpenBetaImporter

    log.info("Starting area import", area=area_name, state=state, strict=strict)
    start = datetime.now()

    with session_scope() as session, OpenBetaClient.from_settings() as client:
        result = OpenBetaImporter(session, client).import_area_by_name(
            area_name, state=state, include_trad=not strict
        )

    elapsed = (datetime.now() - start).total_seconds()
    log.info("Area import complete", elapsed_seconds=elapsed, **result.to_dict())
    _echo_result(result)


@cli.command()
@click.option("--include-trad", is_flag=True, help="Also import trad climbs")
def import_all_states(include_trad):
    """Import all 50 US states, one at a time. Ctrl-C stops after the current state."""
    from tufo.clients import OpenBetaClient
    from tufo.db import session_scope
    from tufo.services import OpenBetaImporter

    cancel = threading.Event()

    def _request_stop(signum, frame):
        log.warning("Stop requested, finishing current state")
        cancel.set()

    previous_handler = signal.signal(signal.SIGINT, _request_stop)
    log.info("Starting all-states import", include_trad=include_trad)
    start = datetime.now()

    try:
        with session_scope() as session, OpenBetaClient.from_settings() as client:
            result = OpenBetaImporter(session, client).import_all_states(
                include_trad=include_trad, cancel_event=cancel
            )
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    elapsed = (datetime.now() - start).total_seconds()
    log.info("All-states import complete", elapsed_seconds=elapsed, **result.to_dict())
    _echo_result(result)


@cli.command()
def fix_states():
    """Rewrite state codes (TX) to full names (Texas)."""
    from tufo.db import session_scope
    from tufo.services import MaintenanceService

    with session_scope() as session:
        result = MaintenanceService(session).normalize_state_names()
    _echo_result(result)


@cli.command()
@click.argument("area_name")
def delete_area(area_name):
    """Delete a top-level area with all its children and climbs."""
    from tufo.db import session_scope
    from tufo.errors import NotFoundError
    from tufo.services import MaintenanceService

    with session_scope() as session:
        try:
            result = MaintenanceService(session).delete_area_by_name(area_name)
        except NotFoundError as e:
            raise click.ClickException(str(e))
    _echo_result(result)


@cli.command()
@click.option("--yes", is_flag=True, help="Confirm deleting every area and climb")
def reset(yes):
    """Delete ALL areas and climbs."""
    from tufo.db import session_scope
    from tufo.services import MaintenanceService

    if not yes:
        click.confirm("Delete every area and climb?", abort=True)

    log.info("Clearing all areas and climbs")
    with session_scope() as session:
        result = MaintenanceService(session).reset_all()
    _echo_result(result)


@cli.command()
def seed():
    """Insert the sample area and climbs into an empty database."""
    from tufo.db import session_scope
    from tufo.services import seed_sample

    with session_scope() as session:
        seeded = seed_sample(session)
    click.echo("Seeded." if seeded else "Already seeded.")


if __name__ == "__main__":
    cli()
