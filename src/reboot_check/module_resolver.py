"""
Out-of-tree kernel module discovery and version resolution.

A module's ``(name, version)`` pair is resolved by an ordered chain of
strategies; the first one that returns a result wins:

1. ``modinfo`` metadata of the first ``.ko`` file found in the module directory.
2. The Nix store path the module directory links to, which is named
   ``<hash>-<name>-<version>``.

Modules that no strategy can name are skipped rather than reported.
"""

import os
import re
import subprocess
from collections.abc import Callable
from pathlib import Path

from src.shared_utilities import get_logger
from src.shared_utilities.telemetry import trace_function

from .config import RebootCheckConfig
from .errors import SnapshotReadError

logger = get_logger(__name__)

ModuleVersion = tuple[str, str]
ResolverStrategy = Callable[[Path], ModuleVersion | None]

# Hyphen immediately followed by an ASCII digit marks the start of the version
_VERSION_BOUNDARY = re.compile(r"-[0-9]")


def split_name_version(name_version: str) -> ModuleVersion | None:
    """Split ``"foo-1.2.3"`` into ``("foo", "1.2.3")``.

    The split happens at the leftmost hyphen followed by a digit, so
    ``"xpad-noone-0-unstable-2024-01-10"`` becomes
    ``("xpad-noone", "0-unstable-2024-01-10")``.

    Returns:
        The (name, version) pair, or None when there is no version boundary
    """
    match = _VERSION_BOUNDARY.search(name_version)
    if match is None:
        return None
    return name_version[: match.start()], name_version[match.start() + 1 :]


def is_placeholder_version(version: str) -> bool:
    """Uninitialized build metadata such as ``#VERSION#``."""
    return version.startswith("#")


def parse_modinfo_output(output: str) -> ModuleVersion | None:
    """Extract the ``name`` and ``version`` fields from modinfo output.

    Every other ``key: value`` line is ignored. Placeholder versions are never
    accepted, and a later placeholder does not replace an earlier real version.

    Args:
        output: Text printed by modinfo, one ``key:   value`` pair per line

    Returns:
        The (name, version) pair, or None if either field is missing
    """
    name = None
    version = None

    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        # Keys are stripped too, so indented lines still match.
        key = key.strip()
        value = value.strip()
        if not value:
            continue

        if key == "name":
            name = value
        elif key == "version" and not is_placeholder_version(value):
            version = value

    if name is None or version is None:
        return None
    return name, version


def parse_store_path(
    target: str, store_prefix: str = "/nix/store/", hash_length: int = 33
) -> ModuleVersion | None:
    """Parse ``/nix/store/<hash>-<name>-<version>/...`` into (name, version)."""
    if not target.startswith(store_prefix):
        return None

    package_dir = target[len(store_prefix) :].split("/", 1)[0]
    if len(package_dir) <= hash_length:
        return None

    return split_name_version(package_dir[hash_length:])


def list_directory(path: Path) -> list[Path]:
    """List the immediate children of an existing directory, sorted by name.

    Raises:
        SnapshotReadError: If the directory cannot be read
    """
    try:
        with os.scandir(path) as entries:
            names = sorted(entry.name for entry in entries)
    except OSError as e:
        raise SnapshotReadError(f"Failed to read directory {path}: {e}", path) from e
    return [Path(path) / name for name in names]


def read_link(path: Path) -> str:
    """Read a symlink target.

    Raises:
        SnapshotReadError: If the link cannot be read
    """
    try:
        return os.readlink(path)
    except OSError as e:
        raise SnapshotReadError(f"Failed to read symlink {path}: {e}", path) from e


def find_ko_file(module_path: Path) -> Path | None:
    """Find the first entry directly under ``module_path`` with ``.ko`` in its name."""
    if not module_path.is_dir():
        return None

    for entry in list_directory(module_path):
        if ".ko" in entry.name:
            return entry
    return None


class ModuleVersionResolver:
    """Resolves out-of-tree module names and versions below a kernel directory."""

    def __init__(self, config: RebootCheckConfig | None = None):
        """Initialize the resolver.

        Args:
            config: Naming rules and tool settings (defaults are used if None)
        """
        self.config = config or RebootCheckConfig()
        self.strategies: list[ResolverStrategy] = [
            self.resolve_from_modinfo,
            self.resolve_from_store_path,
        ]

    def resolve_module_version(self, module_path: Path) -> ModuleVersion | None:
        """Return (name, version) from the first strategy that succeeds."""
        for strategy in self.strategies:
            result = strategy(module_path)
            if result is not None:
                logger.debug(
                    "Module version resolved",
                    path=str(module_path),
                    strategy=getattr(strategy, "__name__", repr(strategy)),
                    module=result[0],
                    version=result[1],
                )
                return result

        logger.debug("Module version unresolved", path=str(module_path))
        return None

    def resolve_from_modinfo(self, module_path: Path) -> ModuleVersion | None:
        """Query modinfo for the first ``.ko`` file in the module directory."""
        ko_path = find_ko_file(module_path)
        if ko_path is None:
            return None

        output = self.query_modinfo(ko_path)
        if output is None:
            return None

        return parse_modinfo_output(output)

    def query_modinfo(self, ko_path: Path) -> str | None:
        """Run the metadata tool against a module file.

        A missing tool, a non-zero exit status or a timeout all count as
        "no metadata" and return None.
        """
        command = [self.config.modinfo_command, str(ko_path)]
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.config.modinfo_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(
                "Metadata query unavailable",
                command=self.config.modinfo_command,
                path=str(ko_path),
                error=str(e),
            )
            return None

        if result.returncode != 0:
            logger.debug(
                "Metadata query failed",
                command=self.config.modinfo_command,
                path=str(ko_path),
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            return None

        return result.stdout

    def resolve_from_store_path(self, module_path: Path) -> ModuleVersion | None:
        """Parse name and version from the store path a module symlink points to."""
        if not module_path.is_symlink():
            return None

        target = read_link(module_path)
        return parse_store_path(
            target,
            store_prefix=self.config.store_prefix,
            hash_length=self.config.store_hash_length,
        )

    @trace_function("scan_oot_modules")
    def scan_oot_modules(self, version_dir: Path) -> dict[str, str]:
        """Collect out-of-tree module versions below a kernel version directory.

        Args:
            version_dir: ``<module tree>/<kernel version>`` directory

        Returns:
            Mapping of module name to version string

        Raises:
            SnapshotReadError: If an existing directory or symlink cannot be read
        """
        versions: dict[str, str] = {}

        for dir_name in self.config.module_dirs:
            dir_path = version_dir / dir_name
            if dir_path.is_symlink() or dir_path.is_dir():
                self._add_module(versions, dir_path)

        drivers_path = version_dir / self.config.drivers_dir
        if drivers_path.exists():
            for entry in list_directory(drivers_path):
                if not entry.is_symlink():
                    continue

                target = read_link(entry)
                if self.config.is_in_tree_target(target):
                    continue

                self._add_module(versions, entry)

        return versions

    def _add_module(self, versions: dict[str, str], module_path: Path) -> None:
        resolved = self.resolve_module_version(module_path)
        if resolved is not None:
            name, version = resolved
            versions[name] = version


def resolve_module_version(
    module_path: Path, config: RebootCheckConfig | None = None
) -> ModuleVersion | None:
    """Convenience wrapper around ModuleVersionResolver.resolve_module_version."""
    return ModuleVersionResolver(config).resolve_module_version(Path(module_path))


def scan_oot_modules(
    version_dir: Path, config: RebootCheckConfig | None = None
) -> dict[str, str]:
    """Convenience wrapper around ModuleVersionResolver.scan_oot_modules."""
    return ModuleVersionResolver(config).scan_oot_modules(Path(version_dir))
