import pytest
from pydantic import ValidationError

from manvsgod.core.config import ManVsGodConfig, get_config
from manvsgod.core.storage.paths import component_db_path


def test_defaults(monkeypatch) -> None:
    for name in ("MANVSGOD_GOOGLE_SHEET_ID", "MANVSGOD_GOOGLE_SHEETS_API_KEY", "MANVSGOD_ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    config = ManVsGodConfig(_env_file=None)
    assert config.environment == "development"
    assert config.log_level == "INFO"
    assert config.max_logs == 100
    assert config.sheets_range == "Decisions!A:E"
    assert config.rules_cooldown_days == 7
    assert config.rules_analysis_window == 100
    assert config.local_store_path == component_db_path("decisions")
    assert not config.has_sheets_credentials


def test_env_prefix(monkeypatch) -> None:
    monkeypatch.setenv("MANVSGOD_GOOGLE_SHEET_ID", "sheet-1")
    monkeypatch.setenv("MANVSGOD_GOOGLE_SHEETS_API_KEY", "key-1")
    monkeypatch.setenv("MANVSGOD_LOG_LEVEL", "debug")
    config = ManVsGodConfig(_env_file=None)
    assert config.google_sheet_id == "sheet-1"
    assert config.has_sheets_credentials
    assert config.log_level == "DEBUG"


def test_placeholder_key_is_not_a_credential() -> None:
    config = ManVsGodConfig(_env_file=None, google_sheet_id="sheet", google_sheets_api_key="your_api_key_here")
    assert not config.has_sheets_credentials


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        ManVsGodConfig(_env_file=None, log_level="LOUD")
    with pytest.raises(ValidationError):
        ManVsGodConfig(_env_file=None, environment="moon")
    with pytest.raises(ValidationError):
        ManVsGodConfig(_env_file=None, rules_analysis_window=0)


def test_production_flag() -> None:
    assert ManVsGodConfig(_env_file=None, environment="PRODUCTION").is_production


def test_get_config_caches() -> None:
    first = get_config(force_reload=True)
    assert get_config() is first
    assert get_config(force_reload=True) is not first


def test_unknown_storage_component() -> None:
    with pytest.raises(ValueError):
        component_db_path("cache")
