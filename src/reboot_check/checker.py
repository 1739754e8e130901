"""Core reboot detection: build both snapshots and reduce them."""

from src.shared_utilities import get_logger
from src.shared_utilities.telemetry import trace_operation

from .config import RebootCheckConfig
from .data_models import Snapshot, VersionMismatch
from .reducer import diff
from .snapshot import SnapshotBuilder

logger = get_logger(__name__)


class RebootChecker:
    """Compares the booted system against the current system."""

    def __init__(
        self,
        config: RebootCheckConfig | None = None,
        builder: SnapshotBuilder | None = None,
    ):
        """Initialize the checker.

        Args:
            config: Root paths and naming rules (defaults are used if None)
            builder: Snapshot builder, created from config if None
        """
        self.config = config or RebootCheckConfig()
        self.builder = builder or SnapshotBuilder(self.config)

    def snapshots(self) -> tuple[Snapshot, Snapshot]:
        """Build the booted and current snapshots."""
        booted = self.builder.build_snapshot(self.config.booted_root)
        current = self.builder.build_snapshot(self.config.current_root)
        return booted, current

    @trace_operation("check_reboot_needed")
    def check(self) -> list[VersionMismatch]:
        """Return every kernel or module mismatch that a reboot would resolve.

        Raises:
            SnapshotReadError: If either system tree exists but cannot be read
        """
        booted, current = self.snapshots()
        mismatches = diff(booted, current)

        logger.info(
            "Reboot check completed",
            booted_root=str(self.config.booted_root),
            current_root=str(self.config.current_root),
            booted_components=len(booted),
            current_components=len(current),
            mismatches=len(mismatches),
        )
        return mismatches


def check_reboot_needed(
    config: RebootCheckConfig | None = None,
) -> list[VersionMismatch]:
    """Return the version mismatches between the booted and current systems."""
    return RebootChecker(config).check()
