"""Status bar block reporting system update age and pending reboots."""

from .config import StatusConfig, StatusError, load_status_config
from .data_models import BarCommand, State
from .status import age_in_days, build_status, classify_age

__all__ = [
    "StatusConfig",
    "StatusError",
    "load_status_config",
    "BarCommand",
    "State",
    "age_in_days",
    "build_status",
    "classify_age",
]
