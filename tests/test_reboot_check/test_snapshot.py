"""Tests for version snapshot building."""

from unittest.mock import Mock

import pytest

from src.reboot_check.config import RebootCheckConfig
from src.reboot_check.data_models import KERNEL_KEY
from src.reboot_check.errors import SnapshotReadError
from src.reboot_check.snapshot import (
    SnapshotBuilder,
    build_snapshot,
    find_kernel_version,
)

from .test_utils import store_path


class TestFindKernelVersion:
    """Test kernel version directory detection."""

    def test_first_digit_entry(self, tmp_path):
        (tmp_path / "source").mkdir()
        (tmp_path / "6.1.0").mkdir()
        assert find_kernel_version(tmp_path) == "6.1.0"

    def test_no_kernel_directory(self, tmp_path):
        (tmp_path / "build").mkdir()
        assert find_kernel_version(tmp_path) is None

    def test_entries_checked_in_name_order(self, tmp_path):
        (tmp_path / "6.6.1").mkdir()
        (tmp_path / "6.1.0").mkdir()
        assert find_kernel_version(tmp_path) == "6.1.0"

    def test_unreadable_tree(self, tmp_path):
        modules_file = tmp_path / "modules"
        modules_file.write_text("")
        with pytest.raises(SnapshotReadError):
            find_kernel_version(modules_file)


class TestBuildSnapshot:
    """Test building a snapshot from a system root."""

    def test_missing_root_is_empty(self, tmp_path):
        assert build_snapshot(tmp_path / "does-not-exist") == {}

    def test_root_without_module_tree_is_empty(self, booted_tree):
        booted_tree.root.mkdir(parents=True)
        assert build_snapshot(booted_tree.root) == {}

    def test_module_tree_without_kernel(self, booted_tree):
        booted_tree.modules_dir.mkdir(parents=True)
        (booted_tree.modules_dir / "extra").mkdir()
        assert build_snapshot(booted_tree.root) == {}

    def test_kernel_only(self, booted_tree, reboot_config):
        booted_tree.kernel("6.1.0")
        assert build_snapshot(booted_tree.root, reboot_config) == {KERNEL_KEY: "6.1.0"}

    def test_kernel_and_modules(self, current_tree, reboot_config):
        current_tree.module_link(
            "6.1.0", "misc", store_path("nvidia-x11-590.50.00-6.1.0", "/lib")
        )
        current_tree.module_link("6.1.0", "updates", store_path("xone-0.5.0", "/lib"))
        current_tree.driver_link(
            "6.1.0", "net", store_path("linux-6.1.0-modules", "/lib/drivers/net")
        )

        snapshot = build_snapshot(current_tree.root, reboot_config)

        assert snapshot == {
            KERNEL_KEY: "6.1.0",
            "nvidia-x11": "590.50.00-6.1.0",
            "xone": "0.5.0",
        }
        assert list(snapshot)[0] == KERNEL_KEY

    def test_module_named_kernel_overwrites(self, current_tree, reboot_config):
        current_tree.module_link("6.1.0", "misc", store_path("kernel-9.9", "/lib"))
        assert build_snapshot(current_tree.root, reboot_config) == {KERNEL_KEY: "9.9"}

    def test_modules_scanned_under_kernel_directory(self, tmp_path):
        resolver = Mock()
        resolver.scan_oot_modules.return_value = {"xone": "0.5.0"}
        modules_dir = tmp_path / "kernel-modules" / "lib" / "modules"
        (modules_dir / "6.1.0").mkdir(parents=True)

        builder = SnapshotBuilder(RebootCheckConfig(), resolver=resolver)
        snapshot = builder.build_snapshot(tmp_path)

        resolver.scan_oot_modules.assert_called_once_with(modules_dir / "6.1.0")
        assert snapshot == {KERNEL_KEY: "6.1.0", "xone": "0.5.0"}

    def test_no_kernel_skips_module_scan(self, tmp_path):
        resolver = Mock()
        (tmp_path / "kernel-modules" / "lib" / "modules").mkdir(parents=True)

        SnapshotBuilder(resolver=resolver).build_snapshot(tmp_path)

        resolver.scan_oot_modules.assert_not_called()

    def test_read_failure_propagates(self, current_tree, reboot_config):
        version_dir = current_tree.kernel("6.1.0")
        (version_dir / "kernel").mkdir()
        (version_dir / "kernel" / "drivers").write_text("")

        with pytest.raises(SnapshotReadError):
            build_snapshot(current_tree.root, reboot_config)
