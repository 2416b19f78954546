"""Shared fixtures for the apperrors test suite."""

import pytest

from apperrors.core.config import reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Every test starts and ends with settings loaded from the environment."""
    reset_settings()
    yield
    reset_settings()
