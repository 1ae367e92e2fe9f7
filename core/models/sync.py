"""Loading, sync and offline-queue state for the invoice manager."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Mapping

from core.models.invoice import Invoice
from utils.timezone import assume_utc, now_utc


class LoadingState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SyncStatus(IntEnum):
    """Per-invoice sync marker. Persisted as the integer value."""

    SYNCED = 0
    PENDING = 1
    FAILED = 2
    OFFLINE = 3


class PendingOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingChange:
    """A mutation made while offline, replayed in order on reconnect."""

    invoice: Invoice
    operation: PendingOperation
    timestamp: datetime = field(default_factory=now_utc)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "invoice": self.invoice.to_json_dict(),
            "operation": self.operation.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> "PendingChange":
        """
        Decode a stored queue entry.

        Raises:
            KeyError, ValueError: If the entry is malformed
        """
        return cls(
            invoice=Invoice.model_validate(data["invoice"]),
            operation=PendingOperation(data["operation"]),
            timestamp=assume_utc(datetime.fromisoformat(data["timestamp"])),
        )


@dataclass(frozen=True)
class InvoiceState:
    """
    Snapshot of the invoice manager.

    Replaced wholesale on every change; observers receive the new object.
    """

    invoices: tuple[Invoice, ...] = ()
    loading_state: LoadingState = LoadingState.IDLE
    error_message: str | None = None
    pending_invoices: tuple[Invoice, ...] = ()
    sync_statuses: Mapping[str, SyncStatus] = field(default_factory=dict)
    is_offline: bool = False

    @property
    def is_loading(self) -> bool:
        return self.loading_state == LoadingState.LOADING

    @property
    def has_error(self) -> bool:
        return self.loading_state == LoadingState.ERROR

    @property
    def is_success(self) -> bool:
        return self.loading_state == LoadingState.SUCCESS

    @property
    def has_pending_sync(self) -> bool:
        return bool(self.pending_invoices)
