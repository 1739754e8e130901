"""CLI entry point for the reboot check tool."""

import sys

import click
from dotenv import load_dotenv

from src.shared_utilities import configure_logging, get_logger

from .checker import RebootChecker
from .config import BOOTED_SYSTEM, CURRENT_SYSTEM, RebootCheckConfig
from .output_formatter import OutputFormat, RebootCheckOutputFormatter
from .reducer import diff

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

EXIT_REBOOT_REQUIRED = 2


@click.command()
@click.option(
    "--booted-root",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help=f"Root of the running system (default: {BOOTED_SYSTEM})",
)
@click.option(
    "--current-root",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help=f"Root of the system activated on next boot (default: {CURRENT_SYSTEM})",
)
@click.option(
    "--modinfo",
    "modinfo_command",
    default=None,
    help="Module metadata tool to run against .ko files (default: modinfo)",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(OutputFormat.ALL),
    default=OutputFormat.TABLE,
    help="Output format (default: table)",
)
@click.option(
    "--show-snapshots",
    is_flag=True,
    help="Include both full snapshots in JSON output",
)
@click.option(
    "--exit-code",
    is_flag=True,
    help=f"Exit with status {EXIT_REBOOT_REQUIRED} when a reboot is required",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Print nothing, only set the exit status",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
def main(
    booted_root: str | None,
    current_root: str | None,
    modinfo_command: str | None,
    output_format: str,
    show_snapshots: bool,
    exit_code: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Detect kernel and out-of-tree module changes that need a reboot.

    Compares the kernel version and out-of-tree module versions of the booted
    system against the current system and lists every component that would
    change after a reboot.

    Examples:
      reboot-check
      reboot-check --format json --show-snapshots
      reboot-check --exit-code --quiet && echo "up to date"
    """
    configure_logging(level="DEBUG" if verbose else None)

    try:
        config = RebootCheckConfig.from_env(
            booted_root=booted_root,
            current_root=current_root,
            modinfo_command=modinfo_command,
        )
        checker = RebootChecker(config)

        booted, current = checker.snapshots()
        mismatches = diff(booted, current)

        if not quiet:
            formatter = RebootCheckOutputFormatter()
            click.echo(
                formatter.format_output(
                    mismatches,
                    output_format,
                    booted=booted if show_snapshots else None,
                    current=current if show_snapshots else None,
                )
            )

    except Exception as e:
        logger.error(f"Error during reboot check: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if exit_code and mismatches:
        sys.exit(EXIT_REBOOT_REQUIRED)


if __name__ == "__main__":
    main()
