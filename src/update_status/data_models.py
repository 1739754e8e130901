"""Data models for status bar output."""

import json
from dataclasses import asdict, dataclass
from enum import Enum


class State(Enum):
    """Severity shown by the status bar block."""

    INFO = "Info"
    GOOD = "Good"
    WARNING = "Warning"
    CRITICAL = "Critical"


@dataclass
class BarCommand:
    """A single status bar update."""

    icon: str
    state: State
    text: str

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["state"] = self.state.value
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
