"""Unit tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from auth_service.core.config import (
    PLACEHOLDER_JWT_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
    validate_config,
)


def test_defaults_match_token_windows():
    assert TestingConfig.ACCESS_TOKEN_TTL_SECONDS == 300
    assert TestingConfig.REFRESH_TOKEN_TTL_SECONDS == 900
    assert TestingConfig.JWT_ALGORITHM == "HS256"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("testing", TestingConfig), ("production", ProductionConfig), ("bogus", DevelopmentConfig)],
)
def test_get_config_follows_app_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    monkeypatch.setenv("NUMBER", "42")
    monkeypatch.setenv("NEGATIVE", "-1")

    assert env_bool("FLAG") is True
    assert env_bool("MISSING_FLAG", default=True) is True
    assert env_int("NUMBER", 1) == 42
    assert env_int("MISSING_NUMBER", 7) == 7
    with pytest.raises(ValueError):
        env_int("NEGATIVE", 1)


def test_production_refuses_placeholder_secret():
    with pytest.raises(RuntimeError, match="overridden"):
        validate_config({"JWT_SECRET_KEY": PLACEHOLDER_JWT_SECRET, "JWT_ALGORITHM": "HS256"})


def test_placeholder_allowed_when_debugging():
    validate_config({"JWT_SECRET_KEY": PLACEHOLDER_JWT_SECRET, "DEBUG": True})


@pytest.mark.parametrize(
    "config",
    [
        {"JWT_SECRET_KEY": "", "TESTING": True},
        {"JWT_SECRET_KEY": "k" * 32, "JWT_ALGORITHM": "RS256", "TESTING": True},
    ],
)
def test_invalid_signing_settings(config):
    with pytest.raises(RuntimeError):
        validate_config(config)
