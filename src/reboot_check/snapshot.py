"""
Version snapshot building for a NixOS system root.

A snapshot maps component names to version strings: the kernel under
``KERNEL_KEY`` plus every out-of-tree module found below
``<root>/kernel-modules/lib/modules/<kernel-version>/``.
"""

import string
from pathlib import Path

from src.shared_utilities import get_logger
from src.shared_utilities.telemetry import trace_function

from .config import RebootCheckConfig
from .data_models import KERNEL_KEY, Snapshot
from .module_resolver import ModuleVersionResolver, list_directory

logger = get_logger(__name__)


def find_kernel_version(modules_dir: Path) -> str | None:
    """Return the first module tree entry whose name starts with an ASCII digit.

    Raises:
        SnapshotReadError: If the module tree exists but cannot be listed
    """
    for entry in list_directory(modules_dir):
        if entry.name and entry.name[0] in string.digits:
            return entry.name
    return None


class SnapshotBuilder:
    """Builds name -> version snapshots for system roots."""

    def __init__(
        self,
        config: RebootCheckConfig | None = None,
        resolver: ModuleVersionResolver | None = None,
    ):
        self.config = config or RebootCheckConfig()
        self.resolver = resolver or ModuleVersionResolver(self.config)

    @trace_function("build_snapshot", include_args=True)
    def build_snapshot(self, root: Path) -> Snapshot:
        """Build the version snapshot for one system root.

        A root without a module tree yields an empty snapshot. A module tree
        without a kernel version directory yields an empty snapshot as well,
        since module versions live under that directory.

        Args:
            root: System root such as ``/run/booted-system``

        Returns:
            Mapping of component name to version string

        Raises:
            SnapshotReadError: If an existing directory or symlink cannot be read
        """
        versions: Snapshot = {}

        modules_dir = self.config.modules_dir(root)
        if not modules_dir.exists():
            logger.debug("No module tree", root=str(root))
            return versions

        kernel_version = find_kernel_version(modules_dir)
        if kernel_version is None:
            logger.debug("No kernel version directory", modules_dir=str(modules_dir))
            return versions

        versions[KERNEL_KEY] = kernel_version
        versions.update(self.resolver.scan_oot_modules(modules_dir / kernel_version))

        logger.debug(
            "Snapshot built",
            root=str(root),
            kernel=kernel_version,
            components=len(versions),
        )
        return versions


def build_snapshot(root: Path, config: RebootCheckConfig | None = None) -> Snapshot:
    """Convenience wrapper around SnapshotBuilder.build_snapshot."""
    return SnapshotBuilder(config).build_snapshot(Path(root))
