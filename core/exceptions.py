"""Typed exceptions for invoice and client operations."""

from typing import Any


class InvoiceAppError(Exception):
    """Base class for invoice/client/settings failures."""


class ValidationFailure(InvoiceAppError):
    """
    A field or business rule rejected the data.

    Always raised before any state is touched, so the caller can fix the
    input and retry.
    """

    def __init__(self, result: Any):
        self.result = result
        self.kind = getattr(result, "error_kind", None)
        message = getattr(result, "error_message", None) or "Invalid invoice data"
        super().__init__(message)


class StorageError(InvoiceAppError):
    """Reading, writing or decoding against the key-value store failed."""


class SyncError(InvoiceAppError):
    """A queued offline change could not be applied on replay."""

    def __init__(self, invoice_id: str, operation: str, reason: str):
        self.invoice_id = invoice_id
        self.operation = operation
        super().__init__(f"Sync of {operation} for invoice {invoice_id} failed: {reason}")


class InvoiceNotFoundError(InvoiceAppError, LookupError):
    """No invoice with the requested id in the current collection."""

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} not found")
