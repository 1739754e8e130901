"""
Configuration for kernel and module reboot detection.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import RebootCheckError

BOOTED_SYSTEM = "/run/booted-system"
CURRENT_SYSTEM = "/run/current-system"


class ConfigError(RebootCheckError):
    """Raised when a configuration value cannot be used."""

    pass


@dataclass
class RebootCheckConfig:
    """Locations and naming rules used to build version snapshots."""

    booted_root: Path = Path(BOOTED_SYSTEM)
    current_root: Path = Path(CURRENT_SYSTEM)
    module_tree: str = "kernel-modules/lib/modules"

    # misc/ holds nvidia, updates/ holds xone, kernel/drivers/* holds other OOT modules
    module_dirs: tuple[str, ...] = ("misc", "updates")
    drivers_dir: str = "kernel/drivers"

    # Targets containing both fragments belong to the kernel's own module package
    in_tree_fragments: tuple[str, str] = ("linux-", "-modules")

    modinfo_command: str = "modinfo"
    modinfo_timeout: float | None = None

    store_prefix: str = "/nix/store/"
    store_hash_length: int = 33

    def __post_init__(self):
        """Normalize paths and validate numeric settings."""
        self.booted_root = Path(self.booted_root)
        self.current_root = Path(self.current_root)

        if len(self.in_tree_fragments) != 2:
            raise ConfigError("in_tree_fragments must contain exactly two fragments")
        if self.store_hash_length < 0:
            raise ConfigError("store_hash_length must not be negative")
        if self.modinfo_timeout is not None and self.modinfo_timeout <= 0:
            raise ConfigError("modinfo_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides) -> "RebootCheckConfig":
        """Build a config from REBOOT_CHECK_* environment variables.

        Explicit keyword overrides that are not None take precedence.
        """
        values: dict = {}

        env_map = {
            "booted_root": "REBOOT_CHECK_BOOTED_ROOT",
            "current_root": "REBOOT_CHECK_CURRENT_ROOT",
            "modinfo_command": "REBOOT_CHECK_MODINFO",
        }
        for key, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                values[key] = value

        timeout = os.getenv("REBOOT_CHECK_MODINFO_TIMEOUT")
        if timeout:
            try:
                values["modinfo_timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid REBOOT_CHECK_MODINFO_TIMEOUT: {timeout!r}"
                ) from e

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def modules_dir(self, root: Path) -> Path:
        """Return the module tree directory below a system root."""
        return Path(root) / self.module_tree

    def is_in_tree_target(self, target: str) -> bool:
        """Check whether a driver symlink target points into the in-tree module set."""
        first, second = self.in_tree_fragments
        return first in target and second in target
