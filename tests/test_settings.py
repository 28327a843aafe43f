"""Tests for application settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from folio.core.config import Settings


class TestSettings:
    """Tests for Settings parsing and defaults."""

    def test_defaults(self, monkeypatch):
        for var in ("SCHEDULER_ENABLED", "TIINGO_API_KEY", "LOG_FORMAT", "JOB_SCHEDULES"):
            monkeypatch.delenv(var, raising=False)
        s = Settings(_env_file=None)

        assert s.job_schedules == {"prices_daily": "0 1 * * 1-5"}
        assert s.scheduler_timezone == "Europe/Paris"
        assert s.history_default_limit == 30
        assert s.transactions_default_limit == 50
        assert s.tiingo_base_url == "https://api.tiingo.com"

    def test_cors_origins_from_comma_string(self):
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert s.cors_origins == ["http://a.test", "http://b.test"]

    def test_job_schedules_from_json(self, monkeypatch):
        monkeypatch.setenv("JOB_SCHEDULES", '{"prices_daily": "30 2 * * 1-5"}')
        s = Settings(_env_file=None)
        assert s.job_schedules == {"prices_daily": "30 2 * * 1-5"}

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field, value", [("log_level", "LOUD"), ("log_format", "xml")])
    def test_invalid_logging_options(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_environment_flags(self):
        assert Settings(_env_file=None, environment="production").is_production
        assert Settings(_env_file=None, environment="development").is_development
