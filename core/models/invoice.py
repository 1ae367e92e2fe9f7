"""Invoice domain models.

Amounts are exact decimals in the invoice currency, stored as JSON numbers.
Tax is a percentage of the subtotal; the discount is an absolute amount
taken off after tax.
All datetimes are UTC-aware; naive values from older records are read as UTC.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import uuid4

from pydantic import Field, field_validator

from core.models.base import ZERO, Money, StoredModel
from core.models.client import Client
from core.models.invoice_item import InvoiceItem
from utils.timezone import assume_utc, now_utc


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"

    @property
    def ordinal(self) -> int:
        """Declaration order, used when sorting by status."""
        return list(InvoiceStatus).index(self)


def generate_invoice_number(when: datetime | None = None) -> str:
    """INV-YYYYMMDD- followed by six random upper-case hex characters."""
    when = when or now_utc()
    return f"INV-{when:%Y%m%d}-{uuid4().hex[:6].upper()}"


class Invoice(StoredModel):
    """Full invoice entity as stored. Equal when ids are equal."""

    id: str
    invoice_number: str
    client: Client
    items: tuple[InvoiceItem, ...]
    created_date: datetime
    due_date: datetime
    tax_percentage: Money = Field(ZERO, ge=0)
    discount_amount: Money = Field(ZERO, ge=0)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: str = ""

    @field_validator("created_date", "due_date")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return assume_utc(value)

    @classmethod
    def create(
        cls,
        client: Client,
        items: Iterable[InvoiceItem],
        due_date: datetime,
        tax_percentage: Decimal | float = ZERO,
        discount_amount: Decimal | float = ZERO,
        notes: str = "",
        invoice_number: str | None = None,
    ) -> "Invoice":
        """New draft invoice with a generated id and invoice number."""
        now = now_utc()
        return cls(
            id=str(uuid4()),
            invoice_number=invoice_number or generate_invoice_number(now),
            client=client,
            items=tuple(items),
            created_date=now,
            due_date=due_date,
            tax_percentage=tax_percentage,
            discount_amount=discount_amount,
            notes=notes,
        )

    @classmethod
    def placeholder(cls, invoice_id: str) -> "Invoice":
        """Stand-in queued for a delete when the invoice itself isn't at hand."""
        now = now_utc()
        return cls(
            id=invoice_id,
            invoice_number="",
            client=Client.empty(),
            items=(),
            created_date=now,
            due_date=now,
        )

    @property
    def subtotal(self) -> Decimal:
        """Sum of item totals."""
        return sum((item.total for item in self.items), ZERO)

    @property
    def tax_amount(self) -> Decimal:
        return self.subtotal * (self.tax_percentage / 100)

    @property
    def total(self) -> Decimal:
        """Subtotal plus tax, minus discount."""
        return self.subtotal + self.tax_amount - self.discount_amount

    @property
    def is_overdue(self) -> bool:
        """Computed from the due date; the OVERDUE status is never consulted."""
        return self.status != InvoiceStatus.PAID and now_utc() > self.due_date

    @property
    def days_past_due(self) -> int:
        """Whole days since the due date when overdue, otherwise 0."""
        if not self.is_overdue:
            return 0
        return (now_utc() - self.due_date).days

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Invoice):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return (
            f"Invoice(id={self.id}, number={self.invoice_number}, "
            f"client={self.client.name}, total={self.total}, status={self.status.value})"
        )
