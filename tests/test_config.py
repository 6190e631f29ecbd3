"""Unit tests for core/config.py -- Settings validation and defaults."""

import logging

import pytest

from core.config import Settings


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def test_production_requires_supabase_url_and_anon_key():
    with pytest.raises(ValueError, match="SUPABASE_URL, SUPABASE_ANON_KEY"):
        _settings(debug=False, supabase_url="", supabase_anon_key="")


def test_debug_tolerates_missing_supabase_config():
    settings = _settings(debug=True, supabase_url="", supabase_anon_key="")
    assert settings.supabase_url == ""


def test_production_with_full_config_is_accepted():
    settings = _settings(debug=False, supabase_url="https://project.supabase.co", supabase_anon_key="anon")
    assert settings.secure_cookies is True


def test_cookie_defaults_are_one_week_and_secure():
    settings = _settings(debug=True)
    assert settings.session_max_age == 60 * 60 * 24 * 7
    assert settings.secure_cookies is True


def test_non_http_url_rejected():
    with pytest.raises(ValueError, match="http"):
        _settings(debug=True, supabase_url="project.supabase.co")


def test_non_positive_cookie_lifetime_rejected():
    with pytest.raises(ValueError, match="SESSION_MAX_AGE"):
        _settings(debug=True, session_max_age=0)


def test_env_vars_are_read(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "env-anon")
    monkeypatch.setenv("SECURE_COOKIES", "false")
    settings = _settings(debug=False)
    assert settings.supabase_url == "https://env.supabase.co"
    assert settings.secure_cookies is False


def test_debug_missing_config_logs_plain_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="barberdesk.config"):
        _settings(debug=True, supabase_url="", supabase_anon_key="")
    [record] = [r for r in caplog.records if r.name == "barberdesk.config"]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "SUPABASE_URL, SUPABASE_ANON_KEY not set. Auth provider calls will fail."


def test_password_reset_limit_default():
    assert _settings(debug=True).password_reset_rate_limit == "5/minute"
