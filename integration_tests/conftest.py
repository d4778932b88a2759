"""Pytest configuration for the end-to-end pipeline tests."""

from pathlib import Path

import pytest

INTEGRATION_DIR = Path(__file__).parent


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: end-to-end tests over a temporary database"
    )


def pytest_collection_modifyitems(items):
    """Mark every test collected from this directory, so `-m "not integration"` skips them."""
    for item in items:
        if INTEGRATION_DIR in item.path.parents:
            item.add_marker(pytest.mark.integration)
