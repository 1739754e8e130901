"""Data models for kernel and module version reconciliation."""

from dataclasses import dataclass
from typing import Any

# Reserved snapshot key for the kernel itself. Real kernel module names never
# equal it; a module that did would overwrite the kernel entry.
KERNEL_KEY = "kernel"

# Booted-side placeholder for components only present in the current system
MISSING_VERSION = "(none)"

# Component name -> version string for one system root
Snapshot = dict[str, str]


@dataclass(frozen=True)
class VersionMismatch:
    """A component whose version differs, or is new, between booted and current."""

    name: str
    booted_version: str
    current_version: str

    @property
    def is_new(self) -> bool:
        """Component only exists in the current system."""
        return self.booted_version == MISSING_VERSION

    @property
    def is_kernel(self) -> bool:
        return self.name == KERNEL_KEY

    def __str__(self) -> str:
        return f"{self.name} {self.booted_version}→{self.current_version}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "booted": self.booted_version,
            "current": self.current_version,
        }
