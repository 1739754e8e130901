"""
Pytest configuration and shared fixtures.
"""

import pytest
from loguru import logger

from src.reboot_check.config import RebootCheckConfig
from src.shared_utilities import logging_config
from tests.test_reboot_check.test_utils import SystemTree


@pytest.fixture
def booted_tree(tmp_path):
    """Synthetic booted system root."""
    return SystemTree(tmp_path / "booted-system")


@pytest.fixture
def current_tree(tmp_path):
    """Synthetic current system root."""
    return SystemTree(tmp_path / "current-system")


@pytest.fixture
def reboot_config(booted_tree, current_tree):
    """Config pointing at the synthetic roots with a tool that does not exist."""
    return RebootCheckConfig(
        booted_root=booted_tree.root,
        current_root=current_tree.root,
        modinfo_command="modinfo-not-installed-for-tests",
    )


@pytest.fixture
def modinfo_output():
    """Realistic modinfo output for the nvidia module."""
    return (
        "filename:       /run/current-system/kernel-modules/lib/modules/"
        "6.1.0/misc/nvidia.ko.xz\n"
        "alias:          char-major-195-*\n"
        "version:        590.48.01\n"
        "supported:      external\n"
        "license:        NVIDIA\n"
        "srcversion:     8C1B1E0A5E3F0D1C7C1E2F3\n"
        "depends:        \n"
        "name:           nvidia\n"
        "vermagic:       6.1.0 SMP preempt mod_unload \n"
    )


@pytest.fixture
def stderr_logging(capsys, monkeypatch):
    """Configure CLI logging from scratch with stderr captured."""
    monkeypatch.setattr(logging_config, "_logging_manager", None)
    logging_config.configure_logging(level="WARNING", enable_file_logging=False)
    yield capsys
    logger.remove()
