"""Tests for domain models - totals, identity, overdue and JSON shape."""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.models import (
    Client,
    CompanySettings,
    Invoice,
    InvoiceItem,
    InvoiceState,
    InvoiceStatus,
    LoadingState,
    PendingChange,
    PendingOperation,
    SyncStatus,
    generate_invoice_number,
)
from utils.timezone import now_utc


def _invoice(items, tax=0.0, discount=0.0, due_in_days=10, status=InvoiceStatus.DRAFT):
    return Invoice.create(
        client=Client.create(name="Ana Silva", email="ana@example.com"),
        items=items,
        due_date=now_utc() + timedelta(days=due_in_days),
        tax_percentage=tax,
        discount_amount=discount,
    ).model_copy(update={"status": status})


# =============================================================================
# CLIENT
# =============================================================================


class TestClient:

    def test_create_generates_unique_ids(self):
        a = Client.create(name="Ana Silva")
        b = Client.create(name="Ana Silva")
        assert a.id and b.id and a.id != b.id

    def test_equality_is_by_id_only(self):
        client = Client.create(name="Ana Silva", email="ana@example.com")
        renamed = client.model_copy(update={"name": "Ana Souza"})
        assert renamed == client
        assert hash(renamed) == hash(client)
        assert renamed.id == client.id

    def test_empty_sentinel(self):
        empty = Client.empty()
        assert empty.id == ""
        assert empty.is_empty is True

    def test_frozen(self):
        client = Client.create(name="Ana Silva")
        with pytest.raises(ValidationError):
            client.name = "Other"


# =============================================================================
# INVOICE ITEM
# =============================================================================


class TestInvoiceItem:

    def test_total(self):
        assert InvoiceItem(description="Design", quantity=3, price=250.5).total == 751.5

    def test_structural_equality(self):
        a = InvoiceItem(description="Design", quantity=1, price=10.0)
        b = InvoiceItem(description="Design", quantity=1, price=10.0)
        c = InvoiceItem(description="Design", quantity=2, price=10.0)
        assert a == b
        assert a != c


# =============================================================================
# INVOICE
# =============================================================================


class TestTotals:

    def test_subtotal_tax_discount_total(self):
        """Items [2 x 100, 1 x 50], tax 10%, discount 20 -> 255."""
        invoice = _invoice(
            [InvoiceItem(description="A", quantity=2, price=100.0),
             InvoiceItem(description="B", quantity=1, price=50.0)],
            tax=10.0,
            discount=20.0,
        )
        assert invoice.subtotal == 250.0
        assert invoice.tax_amount == 25.0
        assert invoice.total == 255.0

    def test_no_items_totals_zero(self):
        invoice = _invoice([])
        assert invoice.subtotal == 0.0
        assert invoice.total == 0.0

    def test_negative_tax_rejected(self):
        with pytest.raises(ValidationError):
            _invoice([], tax=-1.0)


class TestOverdue:

    def test_past_due_unpaid_is_overdue(self):
        invoice = _invoice([], due_in_days=-3, status=InvoiceStatus.SENT)
        assert invoice.is_overdue is True
        assert invoice.days_past_due in (2, 3)

    def test_paid_is_never_overdue(self):
        invoice = _invoice([], due_in_days=-3, status=InvoiceStatus.PAID)
        assert invoice.is_overdue is False
        assert invoice.days_past_due == 0

    def test_future_due_with_overdue_status_is_not_overdue(self):
        """The OVERDUE status value is not authoritative."""
        invoice = _invoice([], due_in_days=5, status=InvoiceStatus.OVERDUE)
        assert invoice.is_overdue is False


class TestFactories:

    def test_create_generates_number_with_date_prefix(self):
        invoice = _invoice([])
        prefix = f"INV-{invoice.created_date:%Y%m%d}-"
        assert invoice.invoice_number.startswith(prefix)
        assert len(invoice.invoice_number) == len(prefix) + 6
        assert invoice.status == InvoiceStatus.DRAFT

    def test_generated_numbers_differ(self):
        when = datetime(2025, 3, 1, tzinfo=timezone.utc)
        numbers = {generate_invoice_number(when) for _ in range(20)}
        assert len(numbers) == 20

    def test_explicit_number_is_kept(self):
        invoice = Invoice.create(
            client=Client.empty(), items=[], due_date=now_utc(), invoice_number="INV-42",
        )
        assert invoice.invoice_number == "INV-42"

    def test_placeholder_keeps_target_id(self):
        placeholder = Invoice.placeholder("target-id")
        assert placeholder.id == "target-id"
        assert placeholder.client.is_empty
        assert placeholder.items == ()

    def test_items_are_frozen(self):
        items = [InvoiceItem(description="Design", quantity=1, price=10.0)]
        invoice = _invoice(items)

        items.append(InvoiceItem(description="Hosting", quantity=1, price=5.0))

        assert isinstance(invoice.items, tuple)
        assert len(invoice.items) == 1
        with pytest.raises(AttributeError):
            invoice.items.append(items[1])
        with pytest.raises(ValidationError):
            invoice.items = ()


class TestIdentity:

    def test_equality_and_hash_by_id(self):
        invoice = _invoice([])
        paid = invoice.model_copy(update={"status": InvoiceStatus.PAID})
        assert paid == invoice
        assert len({invoice, paid}) == 1

    def test_status_ordinal_follows_declaration(self):
        assert [s.ordinal for s in InvoiceStatus] == [0, 1, 2, 3]


class TestJsonShape:

    def test_round_trip_preserves_fields(self):
        invoice = _invoice(
            [InvoiceItem(description="Design", quantity=2, price=99.5)], tax=18.0, discount=5.0,
        ).model_copy(update={"notes": "Thanks"})

        restored = Invoice.from_json(invoice.to_json())

        assert restored.model_dump() == invoice.model_dump()
        assert restored.total == invoice.total

    def test_money_is_decimal_in_memory_and_number_in_json(self):
        invoice = _invoice(
            [InvoiceItem(description="Design", quantity=3, price=Decimal("0.1"))], tax=18.0,
        )

        data = invoice.to_json_dict()

        assert invoice.subtotal == Decimal("0.3")
        assert isinstance(invoice.items[0].price, Decimal)
        assert data["taxPercentage"] == 18.0
        assert isinstance(data["taxPercentage"], float)
        assert data["items"][0]["price"] == 0.1

    def test_keys_are_camel_case(self):
        data = _invoice([]).to_json_dict()
        assert {"invoiceNumber", "createdDate", "dueDate", "taxPercentage", "discountAmount"} <= set(data)
        assert data["status"] == "draft"

    def test_decode_legacy_record_with_defaults_and_naive_dates(self):
        """Older records omit optional fields and carry offset-less timestamps."""
        raw = json.dumps({
            "id": "abc",
            "invoiceNumber": "INV-20240105-123456",
            "client": {"id": "c1", "name": "Ana Silva", "email": "", "address": "", "phone": ""},
            "items": [{"description": "Design", "quantity": 1, "price": 10}],
            "createdDate": "2024-01-05T10:00:00.000",
            "dueDate": "2024-02-04T10:00:00.000",
        })
        invoice = Invoice.from_json(raw)
        assert invoice.tax_percentage == 0.0
        assert invoice.discount_amount == 0.0
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.notes == ""
        assert invoice.created_date.tzinfo == timezone.utc
        assert invoice.created_date.hour == 10

    def test_snake_case_keys_accepted(self):
        invoice = _invoice([])
        data = invoice.model_dump(mode="json")
        assert Invoice.model_validate(data) == invoice


# =============================================================================
# COMPANY SETTINGS
# =============================================================================


class TestCompanySettings:

    def test_defaults(self):
        settings = CompanySettings.default()
        assert settings.name == "Your Company Name"
        assert settings.bank_ifsc == "YOURBANK123"
        assert settings.logo_path is None

    def test_stored_keys(self):
        data = CompanySettings.default().to_json_dict()
        assert {"bankName", "bankAccount", "bankIFSC", "logoPath"} <= set(data)

    def test_round_trip(self):
        settings = CompanySettings.default().model_copy(update={"logo_path": "/tmp/logo.png"})
        assert CompanySettings.from_json(settings.to_json()) == settings


# =============================================================================
# SYNC STATE
# =============================================================================


class TestSyncTypes:

    def test_sync_status_ordinals(self):
        assert [int(s) for s in SyncStatus] == [0, 1, 2, 3]
        assert SyncStatus(2) is SyncStatus.FAILED

    def test_pending_change_round_trip(self):
        change = PendingChange(invoice=_invoice([]), operation=PendingOperation.DELETE)
        restored = PendingChange.from_json_dict(json.loads(json.dumps(change.to_json_dict())))
        assert restored.invoice == change.invoice
        assert restored.operation == PendingOperation.DELETE
        assert restored.timestamp == change.timestamp

    def test_invoice_state_flags(self):
        state = InvoiceState(loading_state=LoadingState.ERROR, pending_invoices=(_invoice([]),))
        assert state.has_error is True
        assert state.is_loading is False
        assert state.has_pending_sync is True
