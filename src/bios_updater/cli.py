"""Command-line interface for the BIOS updater.

Each command prints a single status line for the terminal outcome of the run.

Exit codes:
    0  up to date, update available, or installer launched
    1  run aborted (identity, network, archive, document, integrity, installer,
       or an unexpected error)
    2  unsupported system, no BIOS package, or freshness indeterminate
"""

import asyncio
import logging
import sys

import click

from bios_updater.config import load_settings
from bios_updater.errors import (
    NoCandidatePackageError,
    UnsupportedSystemError,
    UpdaterError,
)
from bios_updater.models.status import DecisionEnum
from bios_updater.services.update import UpdateService
from bios_updater.utils.logging import setup_logger

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_NOT_APPLICABLE = 2

logger = logging.getLogger("bios_updater.cli")


def _exit_code(outcome: DecisionEnum) -> int:
    if outcome in (DecisionEnum.UP_TO_DATE, DecisionEnum.UPDATE_AVAILABLE):
        return EXIT_OK
    return EXIT_NOT_APPLICABLE


def _status_line(decision) -> str:
    mark = "?" if decision.outcome == DecisionEnum.INDETERMINATE else "✓"
    return f"{mark} {decision.message}"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to the console.")
@click.pass_context
def cli(ctx, verbose):
    """BIOS updater CLI."""
    settings = load_settings()
    setup_logger(
        "bios_updater",
        settings.log_file,
        level=logging.DEBUG if verbose else settings.log_level_value,
        console=verbose,
    )
    ctx.obj = settings


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the decision as JSON.")
@click.pass_obj
def check(settings, as_json):
    """Check whether a BIOS update is available."""
    try:
        decision = asyncio.run(UpdateService(settings=settings).check())
    except UpdaterError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(EXIT_ABORTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(f"✗ UNEXPECTED_ERROR: {e}", err=True)
        sys.exit(EXIT_ABORTED)

    if as_json:
        click.echo(decision.model_dump_json(indent=2))
    else:
        click.echo(_status_line(decision))
    sys.exit(_exit_code(decision.outcome))


@cli.command()
@click.option("--silent/--no-silent", default=True, help="Run the package without its UI.")
@click.option("--restart/--no-restart", default=False, help="Let the package restart the machine.")
@click.pass_obj
def install(settings, silent, restart):
    """Download and launch the BIOS update if one is available."""
    try:
        decision = asyncio.run(
            UpdateService(settings=settings).install(silent=silent, auto_restart=restart)
        )
    except (UnsupportedSystemError, NoCandidatePackageError) as e:
        click.echo(f"- {e.message}")
        sys.exit(EXIT_NOT_APPLICABLE)
    except UpdaterError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(EXIT_ABORTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(f"✗ UNEXPECTED_ERROR: {e}", err=True)
        sys.exit(EXIT_ABORTED)

    if decision.update_available:
        click.echo(f"✓ BIOS {decision.candidate_version} installer launched")
        sys.exit(EXIT_OK)

    click.echo(_status_line(decision))
    sys.exit(_exit_code(decision.outcome))


@cli.command()
def serve():
    """Run the HTTP API."""
    from bios_updater.main import main

    main()


if __name__ == "__main__":
    cli()
