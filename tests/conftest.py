"""Shared test fixtures for varchange tests."""

import pytest

from varchange.classification import ClassificationRules
from varchange.config import AnalysisConfig

# Artifact patterns as used for the Linux kernel
LINUX_PATTERNS = {
    "model_files_regex": r".*/Kconfig((\.|\-|\_|\+|\~).*)?",
    "source_files_regex": r".*/.*\.[hcS]((\.|\-|\_|\+|\~).*)?",
    "build_files_regex": r".*/(Makefile|Kbuild)((\.|\-|\_|\+|\~).*)?",
}


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def linux_patterns():
    """Model, source and build patterns for the Linux kernel."""
    return dict(LINUX_PATTERNS)


@pytest.fixture
def linux_rules():
    """Classification rules with Linux kernel patterns."""
    return ClassificationRules.from_patterns(
        LINUX_PATTERNS["model_files_regex"],
        LINUX_PATTERNS["source_files_regex"],
        LINUX_PATTERNS["build_files_regex"],
    )


@pytest.fixture
def coreboot_rules():
    """Rules whose model pattern also matches coreboot's "Config.lb" files."""
    return ClassificationRules.from_patterns(
        r".*/(Kconfig|Config)((\.|\-|\_|\+|\~).*)?",
        LINUX_PATTERNS["source_files_regex"],
        LINUX_PATTERNS["build_files_regex"],
    )


@pytest.fixture
def linux_config(tmp_path):
    """Analysis config writing into a temporary result directory."""
    return AnalysisConfig(output_dir=str(tmp_path / "results"), **LINUX_PATTERNS)
