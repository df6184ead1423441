"""Shared fixtures for the Xenos test suite."""

import pytest

from xenos import config, ATLAS_3I


@pytest.fixture(autouse=True)
def restore_config():
    """Every test starts and ends with default configuration."""
    config.reset()
    yield
    config.reset()


@pytest.fixture
def atlas():
    """3I/ATLAS refined element set."""
    return ATLAS_3I
