from __future__ import annotations

import pytest

from publicconnect.config.settings import DEFAULT_JWT_SECRET, ConfigurationError, Settings


def test_production_without_secret_fails() -> None:
    with pytest.raises(ConfigurationError):
        Settings(environment="production").check()


def test_development_falls_back_to_default_secret() -> None:
    settings = Settings(environment="development").check()

    assert settings.jwt_secret == DEFAULT_JWT_SECRET
    assert not settings.is_production


def test_from_env_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("JWT_EXPIRE_MINUTES", "60")
    monkeypatch.setenv("FRONTEND_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))

    settings = Settings.from_env()

    assert settings.is_production
    assert settings.jwt_secret == "from-env"
    assert settings.cookie_max_age == 3600
    assert settings.frontend_origins == ["http://a.example", "http://b.example"]
    assert settings.upload_dir == tmp_path


def test_from_env_production_requires_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("JWT_SECRET", raising=False)

    with pytest.raises(ConfigurationError):
        Settings.from_env()


def test_default_cookie_lifetime_is_seven_days() -> None:
    assert Settings().cookie_max_age == 7 * 24 * 60 * 60
