import pytest

from shared.service_settings import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_RATE_LIMIT_BURST,
    DEFAULT_RATE_LIMIT_PER_MIN,
    ServiceSettingsError,
    load_service_settings,
)

ENV_KEYS = (
    "ADVISOR_ADMIN_PASSWORD",
    "ADVISOR_RATE_LIMIT_PER_MIN",
    "ADVISOR_RATE_LIMIT_BURST",
    "ADVISOR_CORS_ORIGINS",
    "ADVISOR_DB_URL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_service_settings()

    assert settings.admin_password is None
    assert settings.admin_enabled is False
    assert settings.rate_limit_per_min == DEFAULT_RATE_LIMIT_PER_MIN
    assert settings.rate_limit_burst == DEFAULT_RATE_LIMIT_BURST
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.database_url is None


def test_values_from_environment(clean_env):
    clean_env.setenv("ADVISOR_ADMIN_PASSWORD", " rahasia ")
    clean_env.setenv("ADVISOR_RATE_LIMIT_PER_MIN", "10")
    clean_env.setenv("ADVISOR_RATE_LIMIT_BURST", "2")
    clean_env.setenv("ADVISOR_CORS_ORIGINS", "https://a.example, ,https://b.example")
    clean_env.setenv("ADVISOR_DB_URL", "sqlite:///tmp/advisor.db")

    settings = load_service_settings()

    assert settings.admin_password == "rahasia"
    assert settings.admin_enabled is True
    assert (settings.rate_limit_per_min, settings.rate_limit_burst) == (10, 2)
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.database_url == "sqlite:///tmp/advisor.db"


@pytest.mark.parametrize("raw", ["abc", "0", "-5"])
def test_invalid_rate_limit_raises(clean_env, raw):
    clean_env.setenv("ADVISOR_RATE_LIMIT_PER_MIN", raw)

    with pytest.raises(ServiceSettingsError, match="ADVISOR_RATE_LIMIT_PER_MIN"):
        load_service_settings()


def test_blank_values_fall_back_to_defaults(clean_env):
    clean_env.setenv("ADVISOR_RATE_LIMIT_BURST", "  ")
    clean_env.setenv("ADVISOR_ADMIN_PASSWORD", "   ")

    settings = load_service_settings()

    assert settings.rate_limit_burst == DEFAULT_RATE_LIMIT_BURST
    assert settings.admin_password is None
