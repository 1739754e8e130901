"""
Configuration for the update status block.

The flake modification date and the age thresholds are written to a JSON data
file when the system is rebuilt, for example::

    {
      "modified_date": 1760000000,
      "good_threshold": 6,
      "update_threshold": 7,
      "out_of_date_threshold": 14,
      "icon": "update"
    }
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from src.shared_utilities import get_logger

logger = get_logger(__name__)

DATA_FILE_ENV = "UPDATE_STATUS_DATA_FILE"


class StatusError(Exception):
    """Base exception for update status operations."""

    pass


@dataclass
class StatusConfig:
    """Age thresholds (in days) and display settings for the status block."""

    modified_date: int
    good_threshold: int = 6
    update_threshold: int = 7
    out_of_date_threshold: int = 14
    icon: str = "update"

    def __post_init__(self):
        """Reject thresholds that would leave ages unclassified."""
        if self.update_threshold <= self.good_threshold:
            raise StatusError(
                "update_threshold must be greater than good_threshold "
                f"({self.update_threshold} <= {self.good_threshold})"
            )
        if self.update_threshold > self.good_threshold + 1:
            raise StatusError(
                "update_threshold must directly follow good_threshold, "
                f"ages {self.good_threshold + 1}..{self.update_threshold - 1} "
                "would be unclassified"
            )
        if self.out_of_date_threshold < self.update_threshold:
            raise StatusError(
                "out_of_date_threshold must not be lower than update_threshold "
                f"({self.out_of_date_threshold} < {self.update_threshold})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatusConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown status settings: {sorted(unknown)}")

        values = {k: v for k, v in data.items() if k in known and v is not None}
        if "modified_date" not in values:
            raise StatusError("No modified_date configured")

        try:
            for key in (
                "modified_date",
                "good_threshold",
                "update_threshold",
                "out_of_date_threshold",
            ):
                if key in values:
                    values[key] = int(values[key])
        except (TypeError, ValueError) as e:
            raise StatusError(f"Invalid status setting: {e}") from e

        return cls(**values)


def default_data_file() -> Path:
    """Locate the data file, honouring UPDATE_STATUS_DATA_FILE."""
    env_path = os.getenv(DATA_FILE_ENV)
    if env_path:
        return Path(env_path)
    config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(config_home) / "update-status" / "modified_data.json"


def load_status_config(
    data_file: Path | None = None, **overrides: Any
) -> StatusConfig:
    """Load the status configuration.

    Values from the data file are overridden by any keyword argument that is
    not None. A missing data file is only an error if no modified_date is
    given explicitly.

    Raises:
        StatusError: If the data file is unreadable or the settings are invalid
    """
    path = Path(data_file) if data_file is not None else default_data_file()
    data: dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StatusError(f"Failed to load status data file {path}: {e}") from e

        if not isinstance(data, dict):
            raise StatusError(f"Status data file {path} must contain a JSON object")
        logger.debug("Loaded status data file", path=str(path))
    else:
        logger.debug("Status data file not found", path=str(path))

    data.update({k: v for k, v in overrides.items() if v is not None})
    return StatusConfig.from_dict(data)
