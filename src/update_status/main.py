"""CLI entry point for the update status bar block."""

import sys
from datetime import datetime, timezone

import click
from dotenv import load_dotenv

from src.reboot_check import RebootCheckConfig, check_reboot_needed
from src.shared_utilities import configure_logging, get_logger

from .config import load_status_config
from .status import build_status, safe_reboot_check

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)


@click.command()
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="JSON file written at rebuild time with modified_date and thresholds",
)
@click.option(
    "--modified-date",
    type=int,
    envvar="UPDATE_STATUS_MODIFIED_DATE",
    default=None,
    help="Flake lastModified timestamp in epoch seconds (overrides the data file)",
)
@click.option(
    "--good-threshold", type=int, default=None, help="Days still considered good"
)
@click.option(
    "--update-threshold", type=int, default=None, help="Days after which to warn"
)
@click.option(
    "--out-of-date-threshold",
    type=int,
    default=None,
    help="Days after which the system is critically out of date",
)
@click.option("--icon", default=None, help="Icon name for the status bar block")
@click.option(
    "--booted-root",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help="Root of the running system",
)
@click.option(
    "--current-root",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help="Root of the system activated on next boot",
)
@click.option(
    "--no-reboot-check",
    is_flag=True,
    help="Only report the update age",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
def main(
    data_file: str | None,
    modified_date: int | None,
    good_threshold: int | None,
    update_threshold: int | None,
    out_of_date_threshold: int | None,
    icon: str | None,
    booted_root: str | None,
    current_root: str | None,
    no_reboot_check: bool,
    verbose: bool,
) -> None:
    """Print a status bar block describing system update age.

    The block turns critical when the flake is too old or when the booted
    kernel or out-of-tree modules differ from the current system.
    """
    configure_logging(level="DEBUG" if verbose else None)

    try:
        config = load_status_config(
            data_file,
            modified_date=modified_date,
            good_threshold=good_threshold,
            update_threshold=update_threshold,
            out_of_date_threshold=out_of_date_threshold,
            icon=icon,
        )

        mismatches = []
        if not no_reboot_check:
            mismatches = safe_reboot_check(
                lambda: check_reboot_needed(
                    RebootCheckConfig.from_env(
                        booted_root=booted_root, current_root=current_root
                    )
                )
            )

        command = build_status(config, datetime.now(timezone.utc), mismatches)
        click.echo(command.to_json())

    except Exception as e:
        logger.error(f"Error building update status: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
