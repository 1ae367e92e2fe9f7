"""
Client registry.

Holds the client collection and mirrors it to the store under one key as a
JSON array. Older builds stored the collection in two other shapes; both are
migrated on load and written back in the canonical form.
"""

import json
import logging
import threading
from typing import Any

from clients.store import StoreHandle
from core.event_bus import EventBus
from core.events import ClientsChanged
from core.models import Client

logger = logging.getLogger(__name__)

CLIENTS_KEY = "clients"


class ClientService:
    """
    Service for client operations.

    Persistence failures are logged and never raised: the in-memory
    collection stays authoritative until the next successful save.
    """

    def __init__(self, store: StoreHandle, event_bus: EventBus):
        self.store = store
        self.event_bus = event_bus
        self._clients: list[Client] = []
        self._is_loading = False
        self._lock = threading.RLock()

    @property
    def clients(self) -> tuple[Client, ...]:
        return tuple(self._clients)

    @property
    def clients_count(self) -> int:
        return len(self._clients)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def load_clients(self) -> None:
        """
        Load clients, migrating legacy encodings.

        Accepts the canonical JSON array of objects, a JSON string that
        itself holds that array, and an array whose elements are JSON
        strings. Unreadable data is logged and leaves the collection empty.
        """
        with self._lock:
            self._is_loading = True
            try:
                raw = self.store.open().get(CLIENTS_KEY)
                if raw is None:
                    self._clients = []
                else:
                    decoded, migrated = _decode_clients(raw)
                    self._clients = [Client.model_validate(item) for item in decoded]
                    if migrated:
                        logger.info("Migrated %d client(s) from legacy format", len(self._clients))
                        self._save()
            except Exception:
                logger.exception("Error loading clients")
                self._clients = []
            finally:
                self._is_loading = False
                self._publish()

    def add_client(self, client: Client) -> None:
        with self._lock:
            self._clients.append(client)
            self._publish()
            self._save()

    def update_client(self, client: Client) -> None:
        """Replace the client with the same id. Unknown ids are ignored."""
        with self._lock:
            for index, existing in enumerate(self._clients):
                if existing.id == client.id:
                    self._clients[index] = client
                    break
            else:
                return
            self._publish()
            self._save()

    def delete_client(self, client_id: str) -> None:
        with self._lock:
            self._clients = [c for c in self._clients if c.id != client_id]
            self._publish()
            self._save()

    def get_client_by_id(self, client_id: str) -> Client | None:
        return next((c for c in self._clients if c.id == client_id), None)

    def search_clients(self, query: str) -> list[Client]:
        """Case-insensitive substring match on name or email. Empty query returns all."""
        if not query:
            return list(self._clients)

        needle = query.lower()
        return [
            c for c in self._clients
            if needle in c.name.lower() or needle in c.email.lower()
        ]

    def clear_all_clients(self) -> None:
        with self._lock:
            self._clients = []
            self._publish()
            self._save()

    def _publish(self) -> None:
        self.event_bus.publish(ClientsChanged.create(self._clients))

    def _save(self) -> None:
        try:
            payload = json.dumps([c.to_json_dict() for c in self._clients])
            self.store.open().set(CLIENTS_KEY, payload)
        except Exception:
            logger.exception("Error saving clients")


def _decode_clients(raw: str) -> tuple[list[Any], bool]:
    """
    Decode the stored clients value into a list of dicts.

    Returns:
        (records, migrated) where migrated is True if a legacy shape was found

    Raises:
        ValueError: If the value cannot be read as a client list
    """
    migrated = False
    decoded = json.loads(raw)

    if isinstance(decoded, str):
        # Whole collection was encoded twice
        decoded = json.loads(decoded)
        migrated = True

    if not isinstance(decoded, list):
        raise ValueError(f"Expected a list of clients, got {type(decoded).__name__}")

    records = []
    for element in decoded:
        if isinstance(element, str):
            # Element stored as its own JSON string
            element = json.loads(element)
            migrated = True
        records.append(element)
    return records, migrated
