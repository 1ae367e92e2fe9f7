"""
Invoice state manager.

Owns the in-memory invoice collection, the offline pending queue and the
per-invoice sync status map. Every change replaces the InvoiceState object
and publishes InvoiceStateChanged on the event bus.

Writes go straight to the store while online. While offline they are queued
and replayed in order once connectivity returns. Optimistic changes are
applied in memory first; if the write then fails, the collection is reloaded
from the store to discard the speculative change.

All public mutating operations are serialized on one re-entrant lock. A
connectivity callback that arrives on the same thread while an operation is
in progress defers its replay until that operation finishes.
"""

import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from clients.connectivity import ConnectivityMonitor, ConnectivityStatus
from clients.store import StoreHandle
from core.config import AppConfig
from core.event_bus import EventBus
from core.events import InvoiceStateChanged
from core.exceptions import InvoiceNotFoundError, StorageError, SyncError, ValidationFailure
from core.models import (
    Invoice,
    InvoiceState,
    InvoiceStatus,
    LoadingState,
    PendingChange,
    PendingOperation,
    SyncStatus,
)
from core.models.base import ZERO
from core.validation import ValidationErrorKind, ValidationHelper, ValidationResult
from utils.timezone import assume_utc, days_from_now, now_utc, today_utc

logger = logging.getLogger(__name__)

INVOICES_KEY = "invoices"
PENDING_INVOICES_KEY = "pending_invoices"
PENDING_QUEUE_KEY = "pending_queue"
SYNC_STATUSES_KEY = "sync_statuses"

EXPORT_VERSION = "1.0"


class InvoiceSortBy(str, Enum):
    INVOICE_NUMBER = "invoice_number"
    CLIENT_NAME = "client_name"
    AMOUNT = "amount"
    DATE = "date"
    DUE_DATE = "due_date"
    STATUS = "status"


_SORT_KEYS: dict[InvoiceSortBy, Callable[[Invoice], Any]] = {
    InvoiceSortBy.INVOICE_NUMBER: lambda inv: inv.invoice_number,
    InvoiceSortBy.CLIENT_NAME: lambda inv: inv.client.name,
    InvoiceSortBy.AMOUNT: lambda inv: inv.total,
    InvoiceSortBy.DATE: lambda inv: inv.created_date,
    InvoiceSortBy.DUE_DATE: lambda inv: inv.due_date,
    InvoiceSortBy.STATUS: lambda inv: inv.status.ordinal,
}


class InvoiceService:
    """
    Service for invoice state, persistence and offline sync.

    Usage:
        service = InvoiceService(store, validator, connectivity, event_bus, config)
        service.initialize()
        service.add_invoice(Invoice.create(client, items, due_date))
    """

    def __init__(
        self,
        store: StoreHandle,
        validator: ValidationHelper,
        connectivity: ConnectivityMonitor,
        event_bus: EventBus,
        config: AppConfig,
    ):
        self.store = store
        self.validator = validator
        self.connectivity = connectivity
        self.event_bus = event_bus
        self.config = config

        self._state = InvoiceState()
        self._initialized = False
        self._unsubscribe: Callable[[], None] | None = None
        self._lock = threading.RLock()
        self._depth = 0
        self._sync_deferred = False

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> InvoiceState:
        return self._state

    @property
    def invoices(self) -> tuple[Invoice, ...]:
        return self._state.invoices

    @property
    def loading_state(self) -> LoadingState:
        return self._state.loading_state

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def has_error(self) -> bool:
        return self._state.has_error

    @property
    def is_offline(self) -> bool:
        return self._state.is_offline

    @property
    def has_pending_sync(self) -> bool:
        return self._state.has_pending_sync

    def sync_status(self, invoice_id: str) -> SyncStatus | None:
        return self._state.sync_statuses.get(invoice_id)

    def get_invoice_by_id(self, invoice_id: str) -> Invoice | None:
        for invoice in self._state.invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    # Statistics

    @property
    def total_invoices(self) -> int:
        return len(self._state.invoices)

    @property
    def total_amount(self) -> Decimal:
        return sum((inv.total for inv in self._state.invoices), ZERO)

    @property
    def paid_amount(self) -> Decimal:
        return sum(
            (inv.total for inv in self._state.invoices if inv.status == InvoiceStatus.PAID), ZERO
        )

    @property
    def pending_amount(self) -> Decimal:
        """Total of every invoice not yet paid."""
        return sum(
            (inv.total for inv in self._state.invoices if inv.status != InvoiceStatus.PAID), ZERO
        )

    @property
    def overdue_count(self) -> int:
        return sum(1 for inv in self._state.invoices if inv.is_overdue)

    # Status views

    @property
    def draft_invoices(self) -> list[Invoice]:
        return self.filter_by_status([InvoiceStatus.DRAFT])

    @property
    def sent_invoices(self) -> list[Invoice]:
        return self.filter_by_status([InvoiceStatus.SENT])

    @property
    def paid_invoices(self) -> list[Invoice]:
        return self.filter_by_status([InvoiceStatus.PAID])

    @property
    def overdue_invoices(self) -> list[Invoice]:
        """Invoices past their due date, whatever their stored status."""
        return [inv for inv in self._state.invoices if inv.is_overdue]

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """
        Open the store, start observing connectivity and load invoices.

        Idempotent. Never raises: failures leave the manager in the ERROR
        loading state with the reason in error_message.
        """
        with self._mutation():
            if self._initialized:
                return
            try:
                self.store.open()
                self._initialized = True

                if self._unsubscribe is None:
                    self._unsubscribe = self.connectivity.subscribe(self._on_connectivity_changed)
                self._update_state(replace(self._state, is_offline=not self.connectivity.is_online))

                self._load()

                if not self._state.is_offline:
                    self._sync_pending_changes()
            except Exception as e:
                logger.exception("Invoice manager initialization failed")
                self._update_state(replace(
                    self._state,
                    loading_state=LoadingState.ERROR,
                    error_message=f"Failed to initialize: {e}",
                ))

    def load_invoices(self) -> None:
        """
        Reload invoices, pending invoices and sync statuses from the store.

        Raises:
            StorageError: If any record fails to read or decode. The prior
                collection is kept and the state is ERROR.
        """
        with self._mutation():
            if not self._initialized:
                self.initialize()
                if not self._initialized:
                    raise StorageError(self._state.error_message or "Store unavailable")
            self._load()

    def refresh(self) -> None:
        self.load_invoices()

    def clear_error(self) -> None:
        with self._mutation():
            self._update_state(replace(
                self._state, error_message=None, loading_state=LoadingState.IDLE
            ))

    def close(self) -> None:
        """Stop observing connectivity."""
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None

    # =========================================================================
    # CRUD
    # =========================================================================

    def add_invoice(self, invoice: Invoice, optimistic: bool = True) -> None:
        """
        Add an invoice.

        Args:
            invoice: Invoice to add
            optimistic: Show it in the collection before the write completes

        Raises:
            ValidationFailure: If the invoice breaks a field or business rule
        """
        with self._mutation():
            self._ensure_valid(invoice, "add invoice")
            try:
                if optimistic:
                    self._update_state(replace(
                        self._state, invoices=self._state.invoices + (invoice,)
                    ))

                if self._state.is_offline:
                    self._enqueue(invoice, PendingOperation.CREATE)
                else:
                    self._save_invoice(invoice)
                    self._set_sync_status(invoice.id, SyncStatus.SYNCED)
            except Exception as e:
                if optimistic:
                    self._reconcile()
                self._record_error("add invoice", e)
                raise

    def update_invoice(self, invoice: Invoice, optimistic: bool = True) -> None:
        """
        Replace the invoice with the same id.

        Raises:
            ValidationFailure: If the invoice breaks a field or business rule
        """
        with self._mutation():
            self._ensure_valid(invoice, "update invoice")
            try:
                if optimistic:
                    self._update_state(replace(
                        self._state,
                        invoices=tuple(
                            invoice if inv.id == invoice.id else inv for inv in self._state.invoices
                        ),
                    ))

                if self._state.is_offline:
                    self._enqueue(invoice, PendingOperation.UPDATE)
                else:
                    self._save_invoice(invoice)
                    self._set_sync_status(invoice.id, SyncStatus.SYNCED)
            except Exception as e:
                if optimistic:
                    self._reconcile()
                self._record_error("update invoice", e)
                raise

    def delete_invoice(self, invoice_id: str, optimistic: bool = True) -> None:
        """
        Delete an invoice by id.

        A non-optimistic delete while offline queues a placeholder carrying
        only the target id; replay reads nothing else from delete entries.

        Raises:
            InvoiceNotFoundError: If optimistic and the id is not in the collection
        """
        with self._mutation():
            target: Invoice | None = None
            if optimistic:
                target = self.get_invoice_by_id(invoice_id)
                if target is None:
                    error = InvoiceNotFoundError(invoice_id)
                    self._record_error("delete invoice", error)
                    raise error

            try:
                if optimistic:
                    self._update_state(replace(
                        self._state,
                        invoices=tuple(inv for inv in self._state.invoices if inv.id != invoice_id),
                    ))

                if self._state.is_offline:
                    self._enqueue(target or Invoice.placeholder(invoice_id), PendingOperation.DELETE)
                else:
                    self._remove_invoice(invoice_id)
                    self._remove_sync_status(invoice_id)
            except Exception as e:
                if optimistic:
                    self._reconcile()
                self._record_error("delete invoice", e)
                raise

    def update_invoice_status(self, invoice_id: str, status: InvoiceStatus) -> None:
        """
        Change the status of one invoice.

        Raises:
            InvoiceNotFoundError: If the id is not in the collection
        """
        with self._mutation():
            try:
                invoice = self.get_invoice_by_id(invoice_id)
                if invoice is None:
                    raise InvoiceNotFoundError(invoice_id)
                self.update_invoice(invoice.model_copy(update={"status": status}))
            except Exception as e:
                self._record_error("update invoice status", e)
                raise

    def duplicate_invoice(self, invoice_id: str) -> Invoice:
        """
        Copy an invoice under a new id and the next invoice number.

        The copy is a draft dated today, due config.default_due_days from now.

        Returns:
            The new invoice
        """
        with self._mutation():
            try:
                original = self.get_invoice_by_id(invoice_id)
                if original is None:
                    raise InvoiceNotFoundError(invoice_id)
                duplicate = Invoice.create(
                    client=original.client,
                    items=original.items,
                    due_date=days_from_now(self.config.default_due_days),
                    tax_percentage=original.tax_percentage,
                    discount_amount=original.discount_amount,
                    notes=original.notes,
                    invoice_number=self.next_invoice_number(),
                )
                self.add_invoice(duplicate)
            except Exception as e:
                self._record_error("duplicate invoice", e)
                raise
            return duplicate

    def next_invoice_number(self) -> str:
        """
        Next INV-YYYYMMDD-NNNN number for today.

        One past the highest numeric suffix among today's invoice numbers.
        """
        prefix = f"INV-{today_utc():%Y%m%d}-"
        highest = 0
        for invoice in self._state.invoices:
            number = invoice.invoice_number
            if number.startswith(prefix):
                suffix = number[len(prefix):]
                if suffix.isdigit():
                    highest = max(highest, int(suffix))
        return f"{prefix}{highest + 1:04d}"

    # =========================================================================
    # SEARCH / FILTER / SORT
    # =========================================================================

    def search_invoices(self, query: str) -> list[Invoice]:
        """
        Case-insensitive substring search.

        Matches invoice number, client name, client email and notes.
        An empty query returns every invoice.
        """
        if not query:
            return list(self._state.invoices)

        needle = query.lower()
        return [
            inv for inv in self._state.invoices
            if needle in inv.invoice_number.lower()
            or needle in inv.client.name.lower()
            or needle in inv.client.email.lower()
            or needle in inv.notes.lower()
        ]

    def filter_by_status(self, statuses: Iterable[InvoiceStatus]) -> list[Invoice]:
        wanted = set(statuses)
        return [inv for inv in self._state.invoices if inv.status in wanted]

    def filter_by_date_range(self, start: datetime, end: datetime) -> list[Invoice]:
        """Invoices created within [start - 1 day, end + 1 day]."""
        lower = assume_utc(start) - timedelta(days=1)
        upper = assume_utc(end) + timedelta(days=1)
        return [inv for inv in self._state.invoices if lower <= inv.created_date <= upper]

    def filter_by_amount_range(self, min_amount: Decimal, max_amount: Decimal) -> list[Invoice]:
        return [inv for inv in self._state.invoices if min_amount <= inv.total <= max_amount]

    def sort_invoices(self, sort_by: InvoiceSortBy, ascending: bool = True) -> list[Invoice]:
        return sorted(self._state.invoices, key=_SORT_KEYS[sort_by], reverse=not ascending)

    # =========================================================================
    # BULK OPERATIONS
    # =========================================================================

    def bulk_update_status(self, invoice_ids: Iterable[str], status: InvoiceStatus) -> None:
        """
        Update statuses one by one.

        Not atomic: the first failure stops the batch and is re-raised;
        invoices already updated stay updated.
        """
        with self._mutation():
            self._update_state(replace(self._state, loading_state=LoadingState.LOADING))
            try:
                for invoice_id in invoice_ids:
                    self.update_invoice_status(invoice_id, status)
            except Exception as e:
                self._record_error("bulk update invoices", e)
                raise
            self._update_state(replace(self._state, loading_state=LoadingState.SUCCESS))

    def bulk_delete(self, invoice_ids: Iterable[str]) -> None:
        """
        Delete invoices one by one, then reload.

        Not atomic: the first failure stops the batch and is re-raised.
        """
        with self._mutation():
            self._update_state(replace(self._state, loading_state=LoadingState.LOADING))
            try:
                for invoice_id in invoice_ids:
                    self.delete_invoice(invoice_id, optimistic=False)
                self._load()
            except Exception as e:
                self._record_error("bulk delete invoices", e)
                raise

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def export_data(self) -> dict[str, Any]:
        return {
            "invoices": [inv.to_json_dict() for inv in self._state.invoices],
            "exportDate": now_utc().isoformat(),
            "version": EXPORT_VERSION,
        }

    def import_data(self, payload: Mapping[str, Any]) -> None:
        """
        Import invoices from an export_data() payload.

        Every record is decoded and validated before any is written, so an
        invalid record aborts the import with nothing written.

        Raises:
            ValidationFailure: If any record breaks a rule
            KeyError, ValueError: If the payload is malformed
        """
        with self._mutation():
            self._update_state(replace(self._state, loading_state=LoadingState.LOADING))
            try:
                imported = [Invoice.model_validate(record) for record in payload["invoices"]]

                accepted_numbers: list[str] = []
                for invoice in imported:
                    result = self._validate_invoice(invoice, accepted_numbers)
                    accepted_numbers.append(invoice.invoice_number)
                    if not result.is_valid:
                        raise ValidationFailure(replace(
                            result,
                            error_message=(
                                f"Invalid invoice data for {invoice.invoice_number}: "
                                f"{result.error_message}"
                            ),
                        ))

                for invoice in imported:
                    self._save_invoice(invoice)

                self._load()
            except Exception as e:
                self._record_error("import data", e)
                raise

    def clear_all_invoices(self) -> None:
        """Remove every invoice, the pending queue and all sync statuses."""
        with self._mutation():
            self._update_state(replace(self._state, loading_state=LoadingState.LOADING))
            try:
                store = self.store.open()
                for key in (INVOICES_KEY, PENDING_INVOICES_KEY, PENDING_QUEUE_KEY, SYNC_STATUSES_KEY):
                    store.delete(key)
            except Exception as e:
                self._record_error("clear invoices", e)
                raise
            self._update_state(InvoiceState(
                loading_state=LoadingState.SUCCESS, is_offline=self._state.is_offline
            ))

    # =========================================================================
    # CONNECTIVITY / SYNC
    # =========================================================================

    def _on_connectivity_changed(self, status: ConnectivityStatus) -> None:
        with self._lock:
            is_offline = status == ConnectivityStatus.OFFLINE
            if is_offline == self._state.is_offline:
                return
            self._update_state(replace(self._state, is_offline=is_offline))

            if is_offline or not self._state.has_pending_sync:
                return
            if self._depth > 0:
                # Same-thread callback during an operation; replay when it finishes
                self._sync_deferred = True
                return
            self._run_sync()

    def _run_sync(self) -> None:
        self._depth += 1
        try:
            self._sync_pending_changes()
        finally:
            self._depth -= 1

    def _sync_pending_changes(self) -> None:
        """
        Replay the pending queue in order.

        Each entry is applied independently: success marks its invoice
        SYNCED, failure marks it FAILED and replay moves on. Failed entries
        stay queued when config.retain_failed_sync is set; otherwise the
        whole queue is cleared. Never raises.
        """
        if self._state.is_offline:
            return

        try:
            raw_queue = self.store.open().get_list(PENDING_QUEUE_KEY) or []
        except Exception:
            logger.exception("Failed to read pending queue")
            return

        if not raw_queue and not self._state.pending_invoices:
            return

        logger.info("Replaying %d pending change(s)", len(raw_queue))
        retained: list[str] = []
        failed_ids: set[str] = set()

        for raw in raw_queue:
            try:
                change = PendingChange.from_json_dict(json.loads(raw))
            except (ValueError, KeyError, TypeError):
                logger.exception("Dropping undecodable pending entry")
                continue

            invoice_id = change.invoice.id
            try:
                self._replay(change)
            except SyncError as e:
                logger.exception("Replay failed: %s", e)
                retained.append(raw)
                failed_ids.add(invoice_id)
                try:
                    self._set_sync_status(invoice_id, SyncStatus.FAILED)
                except Exception:
                    logger.exception("Failed to record sync status for invoice %s", invoice_id)

        if not self.config.retain_failed_sync:
            retained = []
            failed_ids = set()

        still_pending = tuple(inv for inv in self._state.pending_invoices if inv.id in failed_ids)
        try:
            store = self.store.open()
            if retained:
                store.set_list(PENDING_QUEUE_KEY, retained)
                store.set_list(PENDING_INVOICES_KEY, [inv.to_json() for inv in still_pending])
            else:
                store.delete(PENDING_QUEUE_KEY)
                store.delete(PENDING_INVOICES_KEY)
        except Exception:
            logger.exception("Failed to persist pending queue after replay")
        self._update_state(replace(self._state, pending_invoices=still_pending))

        if retained:
            logger.warning("%d pending change(s) failed and remain queued", len(retained))

    def _replay(self, change: PendingChange) -> None:
        """
        Apply one queued change and mark its invoice SYNCED.

        Raises:
            SyncError: If the change could not be written
        """
        invoice_id = change.invoice.id
        try:
            if change.operation == PendingOperation.DELETE:
                self._remove_invoice(invoice_id)
            else:
                self._save_invoice(change.invoice)
            self._set_sync_status(invoice_id, SyncStatus.SYNCED)
        except Exception as e:
            raise SyncError(invoice_id, change.operation.value, str(e)) from e

    def _enqueue(self, invoice: Invoice, operation: PendingOperation) -> None:
        store = self.store.open()
        change = PendingChange(invoice=invoice, operation=operation)

        queue = store.get_list(PENDING_QUEUE_KEY) or []
        queue.append(json.dumps(change.to_json_dict()))
        store.set_list(PENDING_QUEUE_KEY, queue)

        pending = self._state.pending_invoices + (invoice,)
        store.set_list(PENDING_INVOICES_KEY, [inv.to_json() for inv in pending])
        self._update_state(replace(self._state, pending_invoices=pending))

        self._set_sync_status(invoice.id, SyncStatus.PENDING)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @contextmanager
    def _mutation(self):
        with self._lock:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0 and self._sync_deferred:
                    self._sync_deferred = False
                    self._run_sync()

    def _update_state(self, state: InvoiceState) -> None:
        self._state = state
        self.event_bus.publish(InvoiceStateChanged.create(state))

    def _record_error(self, action: str, error: Exception) -> None:
        self._update_state(replace(
            self._state,
            loading_state=LoadingState.ERROR,
            error_message=f"Failed to {action}: {error}",
        ))

    def _reconcile(self) -> None:
        """Reload from the store to discard a failed optimistic change."""
        try:
            self._load()
        except StorageError:
            logger.exception("Reconciling reload failed")

    def _load(self) -> None:
        self._update_state(replace(self._state, loading_state=LoadingState.LOADING))
        try:
            store = self.store.open()
            invoices = tuple(Invoice.from_json(raw) for raw in store.get_list(INVOICES_KEY) or [])
            pending = tuple(
                Invoice.from_json(raw) for raw in store.get_list(PENDING_INVOICES_KEY) or []
            )
            statuses = {
                invoice_id: SyncStatus(ordinal)
                for invoice_id, ordinal in json.loads(store.get(SYNC_STATUSES_KEY) or "{}").items()
            }
        except Exception as e:
            self._update_state(replace(
                self._state,
                loading_state=LoadingState.ERROR,
                error_message=f"Failed to load invoices: {e}",
            ))
            raise StorageError(f"Failed to load invoices: {e}") from e

        self._update_state(replace(
            self._state,
            invoices=invoices,
            pending_invoices=pending,
            sync_statuses=statuses,
            loading_state=LoadingState.SUCCESS,
            error_message=None,
        ))
        logger.debug("Loaded %d invoice(s), %d pending", len(invoices), len(pending))

    def _save_invoice(self, invoice: Invoice) -> None:
        """Write the collection with the invoice merged in, then adopt it."""
        invoices = list(self._state.invoices)
        for index, existing in enumerate(invoices):
            if existing.id == invoice.id:
                invoices[index] = invoice
                break
        else:
            invoices.append(invoice)

        self.store.open().set_list(INVOICES_KEY, [inv.to_json() for inv in invoices])
        self._update_state(replace(self._state, invoices=tuple(invoices)))

    def _remove_invoice(self, invoice_id: str) -> None:
        invoices = tuple(inv for inv in self._state.invoices if inv.id != invoice_id)
        self.store.open().set_list(INVOICES_KEY, [inv.to_json() for inv in invoices])
        self._update_state(replace(self._state, invoices=invoices))

    def _set_sync_status(self, invoice_id: str, status: SyncStatus) -> None:
        statuses = {**self._state.sync_statuses, invoice_id: status}
        self._update_state(replace(self._state, sync_statuses=statuses))
        self._persist_sync_statuses(statuses)

    def _remove_sync_status(self, invoice_id: str) -> None:
        statuses = {k: v for k, v in self._state.sync_statuses.items() if k != invoice_id}
        self._update_state(replace(self._state, sync_statuses=statuses))
        self._persist_sync_statuses(statuses)

    def _persist_sync_statuses(self, statuses: Mapping[str, SyncStatus]) -> None:
        payload = {invoice_id: int(status) for invoice_id, status in statuses.items()}
        self.store.open().set(SYNC_STATUSES_KEY, json.dumps(payload))

    def _ensure_valid(self, invoice: Invoice, action: str) -> None:
        result = self._validate_invoice(invoice)
        if not result.is_valid:
            failure = ValidationFailure(result)
            self._record_error(action, failure)
            raise failure

    def _validate_invoice(
        self, invoice: Invoice, batch_numbers: Iterable[str] = ()
    ) -> ValidationResult:
        """
        Field and business rules applied before any add, update or import.

        batch_numbers are numbers already taken by earlier records of the
        same import; they count against uniqueness too.
        """
        result = self.validator.validate(invoice.invoice_number, "invoiceNumber")
        if not result.is_valid:
            return result

        other_numbers = [inv.invoice_number for inv in self._state.invoices if inv.id != invoice.id]
        other_numbers.extend(batch_numbers)
        result = self.validator.validate_unique(
            invoice.invoice_number, "Invoice number", other_numbers
        )
        if not result.is_valid:
            return result

        result = self.validator.validate(invoice.client.name, "clientName")
        if not result.is_valid:
            return result

        if invoice.client.email:
            result = self.validator.validate(invoice.client.email, "email")
            if not result.is_valid:
                return result

        if not invoice.items:
            return ValidationResult.invalid(
                "Invoice must have at least one item",
                ValidationErrorKind.BUSINESS_RULE_VIOLATION,
            )

        for item in invoice.items:
            result = self.validator.validate(item.description, "description")
            if not result.is_valid:
                return result
            if item.quantity <= 0:
                return ValidationResult.invalid(
                    "Item quantity must be greater than zero", ValidationErrorKind.INVALID_RANGE
                )
            if item.price < 0:
                return ValidationResult.invalid(
                    "Item price cannot be negative", ValidationErrorKind.INVALID_RANGE
                )

        result = self.validator.validate_date(invoice.due_date, "Due date", allow_past=False)
        if not result.is_valid:
            return result

        return ValidationResult.valid()
