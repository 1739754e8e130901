"""Tests for update status computation."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.reboot_check.data_models import VersionMismatch
from src.reboot_check.errors import SnapshotReadError
from src.update_status.config import StatusConfig, StatusError
from src.update_status.data_models import BarCommand, State
from src.update_status.status import (
    age_in_days,
    build_status,
    classify_age,
    safe_reboot_check,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> int:
    return int((NOW - timedelta(days=days)).timestamp())


@pytest.fixture
def config():
    return StatusConfig(
        modified_date=days_ago(3),
        good_threshold=6,
        update_threshold=7,
        out_of_date_threshold=14,
        icon="update",
    )


class TestAgeInDays:
    """Test age computation."""

    def test_whole_days(self):
        assert age_in_days(days_ago(3), NOW) == 3

    def test_partial_days_truncated(self):
        assert age_in_days(days_ago(6.9), NOW) == 6

    def test_future_date(self):
        assert age_in_days(days_ago(-0.5), NOW) == 0
        assert age_in_days(days_ago(-2), NOW) == -2

    def test_unrepresentable_timestamp(self):
        with pytest.raises(StatusError, match="Corrupted flake"):
            age_in_days(10**20, NOW)


class TestClassifyAge:
    """Test threshold classification."""

    @pytest.mark.parametrize(
        "days,expected",
        [
            (-1, State.GOOD),
            (0, State.GOOD),
            (6, State.GOOD),
            (7, State.WARNING),
            (13, State.WARNING),
            (14, State.CRITICAL),
            (400, State.CRITICAL),
        ],
    )
    def test_boundaries(self, config, days, expected):
        assert classify_age(days, config) == expected


class TestBuildStatus:
    """Test building the bar command."""

    def test_good(self, config):
        command = build_status(config, NOW)
        assert command == BarCommand(icon="update", state=State.GOOD, text="Age: 3")

    def test_warning(self, config):
        config.modified_date = days_ago(10)
        assert build_status(config, NOW, []).state == State.WARNING

    def test_reboot_escalates_to_critical(self, config):
        mismatches = [
            VersionMismatch("nvidia", "590.48.01", "590.50.00"),
            VersionMismatch("xone", "(none)", "0.5.0"),
        ]

        command = build_status(config, NOW, mismatches)

        assert command.state == State.CRITICAL
        assert command.text == (
            "Age: 3 | Reboot: nvidia 590.48.01→590.50.00, xone (none)→0.5.0"
        )

    def test_json_serialization(self, config):
        output = build_status(config, NOW).to_json()
        assert json.loads(output) == {
            "icon": "update",
            "state": "Good",
            "text": "Age: 3",
        }

    def test_json_keeps_arrow(self, config):
        mismatches = [VersionMismatch("kernel", "6.1.0", "6.1.1")]
        output = build_status(config, NOW, mismatches).to_json()
        assert "6.1.0→6.1.1" in output
        assert json.loads(output)["state"] == "Critical"


class TestSafeRebootCheck:
    """Test failure suppression around the reboot check."""

    def test_passes_result_through(self):
        mismatches = [VersionMismatch("kernel", "6.1.0", "6.1.1")]
        assert safe_reboot_check(lambda: mismatches) == mismatches

    def test_failure_means_no_mismatch(self):
        def failing():
            raise SnapshotReadError("Failed to read directory")

        assert safe_reboot_check(failing) == []

    def test_failure_reason_reaches_stderr(self, stderr_logging):
        def failing():
            raise PermissionError("EACCES on /run/current-system/kernel-modules")

        assert safe_reboot_check(failing) == []

        err = stderr_logging.readouterr().err
        assert "Reboot check failed" in err
        assert "EACCES on /run/current-system/kernel-modules" in err
        assert "PermissionError" in err
