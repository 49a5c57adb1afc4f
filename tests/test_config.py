from __future__ import annotations

from shipment_optimizer.config import DEFAULT_SHIPPO_API_URL, load_settings


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("RATE_PROVIDER", " Shippo ")
    monkeypatch.setenv("SHIPPO_API_TOKEN", "shippo_test_123")
    monkeypatch.setenv("ORIGIN_ADDRESS1", "1 Dock St")
    monkeypatch.setenv("ORIGIN_CITY", "Toronto")
    monkeypatch.setenv("ORIGIN_PROVINCE", "ON")
    monkeypatch.setenv("ORIGIN_COUNTRY", "CA")
    monkeypatch.setenv("RATE_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("ORIGIN_STATE", raising=False)

    settings = load_settings()

    assert settings.rate_provider == "shippo"
    assert settings.shippo_api_token == "shippo_test_123"
    assert settings.origin.city == "Toronto"
    assert settings.origin.state == "ON"
    assert settings.origin.country == "CA"
    assert settings.rate_timeout_seconds == 12.5
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch) -> None:
    for var in ("RATE_PROVIDER", "SHIPPO_API_TOKEN", "SHIPPO_API_URL", "LOG_LEVEL", "RATE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(var, raising=False)

    settings = load_settings()

    assert settings.rate_provider == ""
    assert settings.shippo_api_token is None
    assert settings.shippo_api_url == DEFAULT_SHIPPO_API_URL
    assert settings.log_level == "WARNING"
