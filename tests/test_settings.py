import pytest

from flashdeck.app.settings import AppSettings
from flashdeck.cards.store import DEFAULT_RECENT_LIMIT


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_NAME", "APP_ENV", "LOG_LEVEL", "FLASHDECK_RECENT_LIMIT"):
        monkeypatch.delenv(name, raising=False)

    settings = AppSettings.from_env()

    assert settings.app_name == "Flashdeck"
    assert settings.app_env == "development"
    assert settings.log_level == "INFO"
    assert settings.recent_limit == DEFAULT_RECENT_LIMIT == 10


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NAME", "Drona")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FLASHDECK_RECENT_LIMIT", "3")

    settings = AppSettings.from_env()

    assert settings.app_name == "Drona"
    assert settings.log_level == "DEBUG"
    assert settings.recent_limit == 3


def test_settings_reject_non_positive_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLASHDECK_RECENT_LIMIT", "0")

    with pytest.raises(RuntimeError, match="FLASHDECK_RECENT_LIMIT"):
        AppSettings.from_env()
