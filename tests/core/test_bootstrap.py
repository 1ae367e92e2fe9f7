"""Tests for the composition root."""

import logging
from unittest.mock import patch

from clients.connectivity import ConnectivityStatus
from core.bootstrap import LOG_FORMAT, Services, build_services, configure_logging
from core.config import AppConfig


class TestBuildServices:

    def test_managers_share_collaborators(self, store):
        services = build_services(AppConfig(), store_factory=lambda: store)

        assert isinstance(services, Services)
        assert services.invoices.store is services.store
        assert services.clients.store is services.store
        assert services.settings.store is services.store
        assert services.invoices.event_bus is services.event_bus
        assert services.clients.event_bus is services.event_bus
        assert services.invoices.connectivity is services.connectivity

    def test_store_is_opened_lazily(self, store):
        services = build_services(AppConfig(), store_factory=lambda: store)
        assert services.store.is_open is False

        services.settings.load_settings()

        assert services.store.is_open is True

    def test_start_offline(self, store):
        services = build_services(AppConfig(start_online=False), store_factory=lambda: store)
        assert services.connectivity.status == ConnectivityStatus.OFFLINE

    def test_default_factory_builds_valkey_client(self):
        config = AppConfig(valkey_url="redis://cache:6379/1", key_namespace="acme:")
        with patch("core.bootstrap.ValkeyClient") as valkey_cls:
            services = build_services(config)
            services.store.open()
        valkey_cls.assert_called_once_with("redis://cache:6379/1", namespace="acme:")

    def test_close_closes_store(self, store):
        services = build_services(AppConfig(), store_factory=lambda: store)
        services.store.open()
        services.close()
        assert store.closed is True


class TestConfigureLogging:

    def test_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("WARNING")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)

    def test_format_includes_logger_name_and_level(self):
        assert "%(name)s" in LOG_FORMAT
        assert "%(levelname)s" in LOG_FORMAT
