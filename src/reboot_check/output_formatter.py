"""Output formatting for reboot check results."""

import json
from typing import Any

from .data_models import Snapshot, VersionMismatch


class OutputFormat:
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"

    ALL = [TABLE, JSON]


class RebootCheckOutputFormatter:
    """Formatter for reboot check output."""

    def __init__(self):
        self._format_handlers = {
            OutputFormat.TABLE: self._format_table,
            OutputFormat.JSON: self._format_json,
        }

    def format_output(
        self,
        mismatches: list[VersionMismatch],
        format_type: str = OutputFormat.TABLE,
        booted: Snapshot | None = None,
        current: Snapshot | None = None,
    ) -> str:
        """Format reboot check mismatches.

        Args:
            mismatches: Mismatches returned by the reducer
            format_type: The output format type
            booted: Booted snapshot, included in JSON output if given
            current: Current snapshot, included in JSON output if given

        Returns:
            Formatted string output
        """
        handler = self._format_handlers.get(format_type)
        if not handler:
            raise ValueError(f"Unsupported format type: {format_type}")

        data = self.prepare_data(mismatches, booted, current)
        return handler(data)

    def prepare_data(
        self,
        mismatches: list[VersionMismatch],
        booted: Snapshot | None = None,
        current: Snapshot | None = None,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "reboot_required": bool(mismatches),
            "mismatches": [m.to_dict() for m in mismatches],
        }
        if booted is not None:
            data["booted"] = dict(booted)
        if current is not None:
            data["current"] = dict(current)
        return data

    def _format_json(self, data: dict[str, Any]) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False)

    def _format_table(self, data: dict[str, Any]) -> str:
        if not data["reboot_required"]:
            return "No reboot required: booted and current system match."

        rows = [
            [m["name"], m["booted"], m["current"]] for m in data["mismatches"]
        ]
        lines = [
            "Reboot required:",
            "",
            create_table(["Component", "Booted", "Current"], rows),
        ]
        return "\n".join(lines)


def create_table(headers: list[str], rows: list[list[str]]) -> str:
    """Create a left-aligned text table."""
    column_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            column_widths[i] = max(column_widths[i], len(str(cell)))

    formats = [f"{{:<{w}}}" for w in column_widths]

    lines = []
    header_row = " | ".join(
        fmt.format(h) for fmt, h in zip(formats, headers, strict=False)
    )
    lines.append(header_row)
    lines.append("-" * len(header_row))

    for row in rows:
        lines.append(
            " | ".join(
                fmt.format(str(cell)) for fmt, cell in zip(formats, row, strict=False)
            ).rstrip()
        )

    return "\n".join(lines)
