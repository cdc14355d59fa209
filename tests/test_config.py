"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WINDOW_MATCHING", raising=False)

        settings = Settings(_env_file=None)

        assert settings.window_matching == "lead_time"
        assert settings.cancellation_id_prefix == "CXL"

    def test_window_matching_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("WINDOW_MATCHING", "within_window")

        assert Settings(_env_file=None).window_matching == "within_window"

    def test_unknown_window_matching_rejected_at_load(self, monkeypatch):
        monkeypatch.setenv("WINDOW_MATCHING", "nearest")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
