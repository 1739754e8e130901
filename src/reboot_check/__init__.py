"""Kernel and out-of-tree module reboot detection for NixOS systems."""

from .checker import RebootChecker, check_reboot_needed
from .config import RebootCheckConfig
from .data_models import KERNEL_KEY, MISSING_VERSION, VersionMismatch
from .errors import RebootCheckError, SnapshotReadError
from .module_resolver import (
    ModuleVersionResolver,
    resolve_module_version,
    scan_oot_modules,
)
from .reducer import diff
from .snapshot import SnapshotBuilder, build_snapshot

__all__ = [
    "RebootChecker",
    "check_reboot_needed",
    "RebootCheckConfig",
    "KERNEL_KEY",
    "MISSING_VERSION",
    "VersionMismatch",
    "RebootCheckError",
    "SnapshotReadError",
    "ModuleVersionResolver",
    "resolve_module_version",
    "scan_oot_modules",
    "diff",
    "SnapshotBuilder",
    "build_snapshot",
]
