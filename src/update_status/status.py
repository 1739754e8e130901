"""
Status computation for the update status block.

The block reports how many days ago the system flake was last updated and
escalates to critical when the booted kernel or modules are stale.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from src.reboot_check import VersionMismatch
from src.shared_utilities import get_logger

from .config import StatusConfig, StatusError
from .data_models import BarCommand, State

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def age_in_days(modified_date: int, now: datetime) -> int:
    """Whole days between the flake modification date and ``now``.

    Partial days are truncated toward zero, so a date in the future yields a
    negative or zero age.

    Raises:
        StatusError: If the timestamp cannot be represented
    """
    try:
        modified = datetime.fromtimestamp(modified_date, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise StatusError("Could not deserialize timestamp. Corrupted flake?") from e

    return int((now - modified).total_seconds() / SECONDS_PER_DAY)


def classify_age(days: int, config: StatusConfig) -> State:
    if days >= config.out_of_date_threshold:
        return State.CRITICAL
    if days >= config.update_threshold:
        return State.WARNING
    if days <= config.good_threshold:
        return State.GOOD
    # Unreachable for a validated StatusConfig
    raise StatusError(f"Age {days} is not covered by the configured thresholds")


def format_reboot_summary(mismatches: list[VersionMismatch]) -> str:
    return ", ".join(str(m) for m in mismatches)


def build_status(
    config: StatusConfig,
    now: datetime,
    mismatches: list[VersionMismatch] | None = None,
) -> BarCommand:
    """Build the status bar command.

    Args:
        config: Modification date, thresholds and icon
        now: Current time (timezone aware)
        mismatches: Reboot check result, None or empty when nothing changed

    Returns:
        BarCommand with severity and summary text
    """
    days = age_in_days(config.modified_date, now)
    state = classify_age(days, config)
    text = f"Age: {days}"

    if mismatches:
        state = State.CRITICAL
        text = f"{text} | Reboot: {format_reboot_summary(mismatches)}"

    return BarCommand(icon=config.icon, state=state, text=text)


def safe_reboot_check(
    check: Callable[[], list[VersionMismatch]],
) -> list[VersionMismatch]:
    """Run a reboot check, treating any failure as "no mismatch detected"."""
    try:
        return check()
    except Exception as e:
        logger.warning(
            "Reboot check failed, assuming no reboot is required: {error_message}",
            error_type=type(e).__name__,
            error_message=str(e),
        )
        return []
