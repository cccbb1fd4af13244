import pytest
from pydantic import ValidationError

from src.cleanroute.config import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.default_algorithm == "2opt"
    assert settings.improvement_early_exit_ratio == 0.8
    assert settings.display_timezone == "UTC"


@pytest.mark.parametrize("zone", ["UTC", "utc", "Asia/Riyadh", "America/New_York"])
def test_settings_accepts_known_timezones(zone):
    settings = Settings(_env_file=None, display_timezone=zone)

    assert settings.display_timezone in {"UTC", zone}


@pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "Not a zone"])
def test_settings_rejects_unknown_timezone(zone):
    with pytest.raises(ValidationError, match="display timezone"):
        Settings(_env_file=None, display_timezone=zone)


def test_settings_reads_timezone_from_environment(monkeypatch):
    monkeypatch.setenv("CLEANROUTE_DISPLAY_TIMEZONE", "Nowhere/Special")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_parses_comma_separated_origins():
    settings = Settings(_env_file=None, frontend_allowed_origins="https://a.example, https://b.example")

    assert settings.frontend_allowed_origins == ("https://a.example", "https://b.example")
