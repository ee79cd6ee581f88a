from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("DATABASE_URL", "JWT_SECRET", "TOKEN_TTL_DAYS", "CORS_ORIGINS", "BCRYPT_ROUNDS"):
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of these tests
    monkeypatch.setattr("config.load_dotenv", lambda: None)


def test_from_env_reads_values(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/library")
    monkeypatch.setenv("JWT_SECRET", "abc")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    settings = Settings.from_env()
    assert settings.database_url == "postgresql://u:p@db/library"
    assert settings.jwt_secret == "abc"
    assert settings.token_ttl == timedelta(days=15)
    assert settings.bcrypt_rounds == 10
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert not settings.is_sqlite


def test_missing_jwt_secret_aborts_startup(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///x.db")
    with pytest.raises(ValueError, match="JWT_SECRET"):
        Settings.from_env()


def test_missing_database_url_aborts_startup(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "abc")
    with pytest.raises(ValueError, match="DATABASE_URL"):
        Settings.from_env()


def test_settings_are_immutable():
    settings = Settings(database_url="sqlite://", jwt_secret="abc")
    with pytest.raises(FrozenInstanceError):
        settings.jwt_secret = "changed"
