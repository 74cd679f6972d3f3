"""Tests for settings defaults and validation."""

import pytest
from pydantic import ValidationError

from toneguide.core.config import Settings


def test_defaults():
    """Tunable limits default to the documented values."""
    settings = Settings()

    assert settings.MAX_SELECTED_RULES == 6
    assert settings.HISTORY_CAPACITY == 3
    assert settings.GENERATION_TIMEOUT_SECONDS == 8.0
    assert settings.HISTORY_BACKEND == "memory"


def test_env_overrides(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv("MAX_SELECTED_RULES", "4")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "2.5")

    settings = Settings()

    assert settings.MAX_SELECTED_RULES == 4
    assert settings.GENERATION_TIMEOUT_SECONDS == 2.5


def test_rejects_non_positive_timeout():
    """Timeout must be positive."""
    with pytest.raises(ValidationError):
        Settings(GENERATION_TIMEOUT_SECONDS=0)
