"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notification_engine.config import Settings, get_settings, reset_settings_cache


def test_settings_are_read_from_the_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "50")
    monkeypatch.setenv("MARKETING_TYPES", '["newsletter", "campaign"]')
    reset_settings_cache()
    try:
        settings = get_settings()
        assert settings.default_page_size == 50
        assert settings.marketing_types == ["newsletter", "campaign"]
        assert get_settings() is settings
    finally:
        monkeypatch.undo()
        reset_settings_cache()


@pytest.mark.parametrize(
    "overrides",
    [
        {"default_page_size": 0},
        {"default_page_size": 101},
        {"default_batch_size": 5},
        {"digest_batch_size": 1000},
    ],
)
def test_out_of_range_sizes_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", **overrides)
