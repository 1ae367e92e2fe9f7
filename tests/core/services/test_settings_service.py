"""Tests for SettingsService."""

import json
import logging

import pytest

from core.models import CompanySettings


@pytest.fixture
def events(event_bus):
    received = []
    event_bus.subscribe("CompanySettingsChanged", lambda e: received.append(e.settings))
    return received


@pytest.fixture
def acme():
    return CompanySettings(
        name="Acme Studio",
        address="4 Marine Drive, Mumbai",
        phone="+91 22 5555 0101",
        email="billing@acme.in",
        bank_name="State Bank",
        bank_account="00112233445566",
        bank_ifsc="SBIN0001234",
    )


class TestSettingsService:

    def test_defaults_before_load(self, settings_service):
        assert settings_service.company_settings == CompanySettings.default()
        assert settings_service.is_loading is False

    def test_load_with_nothing_stored_keeps_defaults(self, settings_service, events):
        settings_service.load_settings()

        assert settings_service.company_settings == CompanySettings.default()
        assert events == [CompanySettings.default()]

    def test_load_stored_settings(self, settings_service, store, acme):
        store.strings["company_settings"] = acme.to_json()

        settings_service.load_settings()

        assert settings_service.company_settings == acme

    def test_stored_shape_uses_original_key_names(self, settings_service, store, acme):
        settings_service.update_company_settings(acme)

        stored = json.loads(store.strings["company_settings"])
        assert stored["bankName"] == "State Bank"
        assert stored["bankIFSC"] == "SBIN0001234"
        assert stored["logoPath"] is None

    def test_corrupt_settings_fall_back_to_defaults(self, settings_service, store, caplog):
        store.strings["company_settings"] = json.dumps({"name": "Half a record"})

        with caplog.at_level(logging.ERROR, logger="core.services.settings_service"):
            settings_service.load_settings()

        assert settings_service.company_settings == CompanySettings.default()
        assert "Error loading settings" in caplog.text

    def test_update_publishes_and_persists(self, settings_service, store, events, acme):
        settings_service.update_company_settings(acme)

        assert settings_service.company_settings == acme
        assert events == [acme]
        assert CompanySettings.from_json(store.strings["company_settings"]) == acme

    def test_reset_to_defaults(self, settings_service, store, acme):
        settings_service.update_company_settings(acme)

        settings_service.reset_to_defaults()

        assert settings_service.company_settings == CompanySettings.default()
        stored = CompanySettings.from_json(store.strings["company_settings"])
        assert stored == CompanySettings.default()

    def test_save_failure_is_logged_not_raised(self, settings_service, store, acme, caplog):
        store.fail_when = lambda op, key, value: op == "set"

        with caplog.at_level(logging.ERROR, logger="core.services.settings_service"):
            settings_service.update_company_settings(acme)

        assert settings_service.company_settings == acme
        assert "Error saving settings" in caplog.text
