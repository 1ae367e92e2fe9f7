"""Shared test fixtures for the invoice core test suite."""

from datetime import timedelta
from typing import Callable

import pytest

from clients.connectivity import ConnectivityMonitor
from clients.store import StoreHandle
from core.config import AppConfig
from core.event_bus import EventBus
from core.models import Client, Invoice, InvoiceItem, InvoiceStatus
from core.validation import ValidationHelper
from utils.timezone import now_utc


# =============================================================================
# IN-MEMORY STORE
# =============================================================================


class InMemoryStore:
    """
    KeyValueStore double backed by dicts.

    Set fail_when to a callable (op, key, value) -> bool to make matching
    writes raise ConnectionError.
    """

    def __init__(self):
        self.strings: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}
        self.fail_when: Callable[[str, str, object], bool] | None = None
        self.closed = False

    def _check(self, op: str, key: str, value: object = None) -> None:
        if self.fail_when is not None and self.fail_when(op, key, value):
            raise ConnectionError(f"{op} {key} failed")

    def get(self, key: str) -> str | None:
        self._check("get", key)
        return self.strings.get(key)

    def set(self, key: str, value: str) -> None:
        self._check("set", key, value)
        self.strings[key] = value

    def delete(self, key: str) -> bool:
        self._check("delete", key)
        existed = key in self.strings or key in self.lists
        self.strings.pop(key, None)
        self.lists.pop(key, None)
        return existed

    def get_list(self, key: str) -> list[str] | None:
        self._check("get_list", key)
        values = self.lists.get(key)
        return list(values) if values is not None else None

    def set_list(self, key: str, values: list[str]) -> None:
        self._check("set_list", key, values)
        self.lists[key] = list(values)

    def close(self) -> None:
        self.closed = True


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def store_handle(store) -> StoreHandle:
    return StoreHandle(lambda: store)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    return ConnectivityMonitor()


@pytest.fixture
def validator() -> ValidationHelper:
    return ValidationHelper()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def invoice_service(store_handle, validator, connectivity, event_bus, config):
    """InvoiceService over the in-memory store (not yet initialized)."""
    from core.services.invoice_service import InvoiceService

    service = InvoiceService(store_handle, validator, connectivity, event_bus, config)
    yield service
    service.close()


@pytest.fixture
def client_service(store_handle, event_bus):
    from core.services.client_service import ClientService

    return ClientService(store_handle, event_bus)


@pytest.fixture
def settings_service(store_handle, event_bus):
    from core.services.settings_service import SettingsService

    return SettingsService(store_handle, event_bus)


# =============================================================================
# DATA FACTORIES
# =============================================================================


@pytest.fixture
def make_client():
    """Build a Client that passes field validation."""

    def _make(name: str = "Ana Silva", email: str = "ana@example.com", **kwargs) -> Client:
        kwargs.setdefault("address", "12 Harbour Road, Kochi")
        kwargs.setdefault("phone", "+91 98765 43210")
        return Client.create(name=name, email=email, **kwargs)

    return _make


@pytest.fixture
def make_invoice(make_client):
    """Build an Invoice that passes every add/update rule by default."""

    def _make(
        invoice_number: str = "INV-1001",
        client: Client | None = None,
        items: list[InvoiceItem] | None = None,
        due_in_days: int = 14,
        status: InvoiceStatus = InvoiceStatus.DRAFT,
        **kwargs,
    ) -> Invoice:
        invoice = Invoice.create(
            client=client or make_client(),
            items=items if items is not None else [
                InvoiceItem(description="Design work", quantity=2, price=1500.0),
                InvoiceItem(description="Hosting (annual)", quantity=1, price=2400.0),
            ],
            due_date=now_utc() + timedelta(days=due_in_days),
            invoice_number=invoice_number,
            **kwargs,
        )
        if status != InvoiceStatus.DRAFT:
            invoice = invoice.model_copy(update={"status": status})
        return invoice

    return _make
