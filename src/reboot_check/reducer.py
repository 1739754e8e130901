"""Reduction of two version snapshots into reboot-relevant mismatches."""

from collections.abc import Mapping

from .data_models import MISSING_VERSION, VersionMismatch


def diff(
    booted: Mapping[str, str], current: Mapping[str, str]
) -> list[VersionMismatch]:
    """Compare the booted snapshot against the current one.

    Components whose version strings differ are reported with both versions,
    components that only exist in ``current`` are reported with a booted
    version of ``"(none)"``. Components that only exist in ``booted`` are not
    reported, since removing a module does not make the running system stale.

    Versions are compared as exact strings.

    Returns:
        Mismatches in booted order, followed by new components in current order
    """
    mismatches = []

    for name, booted_version in booted.items():
        current_version = current.get(name)
        if current_version is not None and current_version != booted_version:
            mismatches.append(
                VersionMismatch(
                    name=name,
                    booted_version=booted_version,
                    current_version=current_version,
                )
            )

    for name, current_version in current.items():
        if name not in booted:
            mismatches.append(
                VersionMismatch(
                    name=name,
                    booted_version=MISSING_VERSION,
                    current_version=current_version,
                )
            )

    return mismatches
