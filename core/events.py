"""
Domain events for the invoice core.

Immutable event objects published after every state change. Observers
subscribe through the EventBus instead of holding references to the
managers, so managers never know who is listening.

Event Categories:
- InvoiceStateChanged: the invoice manager replaced its state object
- ClientsChanged: the client registry changed its collection
- CompanySettingsChanged: company settings were loaded, replaced or reset

Events carry the full new value so handlers don't need to read it back
from the manager.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable
from uuid import uuid4

from core.models import Client, CompanySettings, InvoiceState
from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class AppEvent:
    """Base class for all invoice core events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceStateChanged(AppEvent):
    """The invoice manager published a new InvoiceState."""
    state: InvoiceState | None = None

    @classmethod
    def create(cls, state: InvoiceState) -> "InvoiceStateChanged":
        return cls(state=state)


# =============================================================================
# CLIENT EVENTS
# =============================================================================


@dataclass(frozen=True)
class ClientsChanged(AppEvent):
    """The client collection changed."""
    clients: tuple[Client, ...] = ()

    @classmethod
    def create(cls, clients: Iterable[Client]) -> "ClientsChanged":
        return cls(clients=tuple(clients))


# =============================================================================
# SETTINGS EVENTS
# =============================================================================


@dataclass(frozen=True)
class CompanySettingsChanged(AppEvent):
    """Company settings were replaced."""
    settings: CompanySettings | None = None

    @classmethod
    def create(cls, settings: CompanySettings) -> "CompanySettingsChanged":
        return cls(settings=settings)
