"""
Pytest configuration and shared fixtures for TorKit tests.
"""

import logging

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.bundles import bundle_archive, make_layout

from torkit.core.platform import clear_platform_cache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TorKit environment overrides."""
    for name in ("TORKIT_DOWNLOAD_DIR", "TORKIT_TARGET", "TORKIT_VERSION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Ensure platform detection is re-run for every test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def torkit_logs(caplog):
    """Capture TorKit log records at DEBUG level."""
    caplog.set_level(logging.DEBUG, logger="torkit")
    return caplog
