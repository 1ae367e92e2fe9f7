"""Core domain models."""

from core.models.client import Client
from core.models.invoice_item import InvoiceItem
from core.models.invoice import Invoice, InvoiceStatus, generate_invoice_number
from core.models.company_settings import CompanySettings
from core.models.sync import (
    InvoiceState,
    LoadingState,
    PendingChange,
    PendingOperation,
    SyncStatus,
)

__all__ = [
    # Client
    "Client",
    # Invoice
    "Invoice", "InvoiceItem", "InvoiceStatus", "generate_invoice_number",
    # Settings
    "CompanySettings",
    # Sync state
    "InvoiceState", "LoadingState", "PendingChange", "PendingOperation", "SyncStatus",
]
