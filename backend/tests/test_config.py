from pathlib import Path

import pytest

from app.config import DEFAULT_STATIC_DIR, Settings


def test_defaults_when_env_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PORT", "HOST", "STATIC_DIR", "CORS_ALLOW_ORIGINS", "LEADERBOARD_SIZE", "OUTBOX_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.port == 8080
    assert settings.host == "0.0.0.0"
    assert settings.static_dir == DEFAULT_STATIC_DIR
    assert settings.cors_allow_origins == ("*",)
    assert settings.leaderboard_size == 10
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path))
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LEADERBOARD_SIZE", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.port == 9090
    assert settings.static_dir == tmp_path
    assert settings.cors_allow_origins == ("https://a.example", "https://b.example")
    assert settings.leaderboard_size == 5
    assert settings.log_level == "DEBUG"


def test_invalid_integer_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OUTBOX_SIZE", "lots")
    assert Settings.from_env().outbox_size == 64
