"""
Composition root.

Builds every collaborator explicitly and hands them to the managers; there
are no module-level singletons. Hosts call build_services() once at startup
and report connectivity through services.connectivity.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from clients.connectivity import ConnectivityMonitor, ConnectivityStatus
from clients.store import KeyValueStore, StoreHandle
from clients.valkey_client import ValkeyClient
from core.config import AppConfig
from core.event_bus import EventBus
from core.services.client_service import ClientService
from core.services.export_service import ExportService
from core.services.invoice_service import InvoiceService
from core.services.settings_service import SettingsService
from core.validation import ValidationHelper

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger().setLevel(level)


@dataclass
class Services:
    config: AppConfig
    store: StoreHandle
    event_bus: EventBus
    connectivity: ConnectivityMonitor
    validator: ValidationHelper
    invoices: InvoiceService
    clients: ClientService
    settings: SettingsService
    exports: ExportService

    def close(self) -> None:
        self.invoices.close()
        self.store.close()


def build_services(
    config: AppConfig,
    store_factory: Callable[[], KeyValueStore] | None = None,
) -> Services:
    """
    Wire the managers around one shared store handle.

    Args:
        config: Application configuration
        store_factory: Opens the store; defaults to a ValkeyClient on
            config.valkey_url. The store is opened lazily on first use.
    """
    if store_factory is None:
        def store_factory() -> KeyValueStore:
            return ValkeyClient(config.valkey_url, namespace=config.key_namespace)

    store = StoreHandle(store_factory)
    event_bus = EventBus()
    connectivity = ConnectivityMonitor(
        ConnectivityStatus.ONLINE if config.start_online else ConnectivityStatus.OFFLINE
    )
    validator = ValidationHelper()

    logger.debug("Building services (namespace=%s)", config.key_namespace)
    return Services(
        config=config,
        store=store,
        event_bus=event_bus,
        connectivity=connectivity,
        validator=validator,
        invoices=InvoiceService(store, validator, connectivity, event_bus, config),
        clients=ClientService(store, event_bus),
        settings=SettingsService(store, event_bus),
        exports=ExportService(),
    )
