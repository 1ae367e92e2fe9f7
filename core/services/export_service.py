"""
Invoice export and import.

Provides:
  - CSV/JSON rendering of invoices with field selection
  - Scope, date range, status and client filtering
  - Writing an export file and describing the result
  - Summary statistics over a set of invoices
  - Best-effort CSV import of previously exported files
"""

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from core.models import Client, Invoice, InvoiceStatus
from core.models.base import ZERO
from utils.currency import format_amount
from utils.timezone import assume_utc, days_from_now, format_day, now_utc

logger = logging.getLogger(__name__)


# =============================================================================
# EXPORT CONFIGURATION
# =============================================================================

AVAILABLE_FIELDS: dict[str, str] = {
    "invoiceNumber": "Invoice Number",
    "clientName": "Client Name",
    "clientEmail": "Client Email",
    "clientPhone": "Client Phone",
    "clientAddress": "Client Address",
    "createdDate": "Issue Date",
    "dueDate": "Due Date",
    "status": "Status",
    "items": "Items",
    "itemCount": "Item Count",
    "subtotal": "Subtotal",
    "taxPercentage": "Tax %",
    "taxAmount": "Tax Amount",
    "discountAmount": "Discount",
    "total": "Total Amount",
    "notes": "Notes",
    "isOverdue": "Overdue",
    "daysPastDue": "Days Past Due",
}

EXPORT_VERSION = "1.0"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


class ExportScope(str, Enum):
    ALL = "all"
    FILTERED = "filtered"
    SELECTED = "selected"


class ExportOptions(BaseModel):
    """What to export and how to render it."""

    format: ExportFormat
    scope: ExportScope = ExportScope.ALL
    include_fields: list[str] = Field(default_factory=list)
    date_from: datetime | None = None
    date_to: datetime | None = None
    status_filter: list[InvoiceStatus] | None = None
    client_filter: str | None = None
    include_header: bool = True
    separator: str = Field(",", min_length=1, max_length=1)
    pretty_json: bool = True
    custom_file_name: str | None = None

    @property
    def fields(self) -> list[str]:
        """Selected field keys, or every available field when none are selected."""
        return self.include_fields or list(AVAILABLE_FIELDS)


@dataclass(frozen=True)
class ExportResult:
    file_path: str
    file_name: str
    format: ExportFormat
    record_count: int
    file_size_bytes: int
    exported_at: datetime
    success: bool
    error_message: str | None = None

    @classmethod
    def error(cls, message: str, export_format: ExportFormat) -> "ExportResult":
        return cls(
            file_path="",
            file_name="",
            format=export_format,
            record_count=0,
            file_size_bytes=0,
            exported_at=now_utc(),
            success=False,
            error_message=message,
        )


@dataclass(frozen=True)
class ExportStatistics:
    total_invoices: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    status_counts: dict[InvoiceStatus, int] = field(default_factory=dict)
    overdue_count: int = 0


class ExportService:
    """
    Renders invoices to CSV/JSON files and reads exported CSV back.

    Usage:
        service = ExportService()
        options = ExportOptions(format=ExportFormat.CSV, status_filter=[InvoiceStatus.PAID])
        result = service.export_invoices(invoices, options, directory="/tmp/exports")
    """

    # =========================================================================
    # FILTERING
    # =========================================================================

    def filter_invoices(
        self,
        invoices: Iterable[Invoice],
        options: ExportOptions,
        selected_ids: Iterable[str] | None = None,
    ) -> list[Invoice]:
        """
        Apply scope, date, status and client filters.

        Date bounds are padded by one day on each side.
        """
        filtered = list(invoices)

        selected = set(selected_ids or ())
        if options.scope == ExportScope.SELECTED and selected:
            filtered = [inv for inv in filtered if inv.id in selected]

        if options.date_from is not None:
            lower = assume_utc(options.date_from) - timedelta(days=1)
            filtered = [inv for inv in filtered if inv.created_date > lower]

        if options.date_to is not None:
            upper = assume_utc(options.date_to) + timedelta(days=1)
            filtered = [inv for inv in filtered if inv.created_date < upper]

        if options.status_filter:
            wanted = set(options.status_filter)
            filtered = [inv for inv in filtered if inv.status in wanted]

        if options.client_filter:
            needle = options.client_filter.lower()
            filtered = [
                inv for inv in filtered
                if needle in inv.client.name.lower() or needle in inv.client.email.lower()
            ]

        return filtered

    # =========================================================================
    # RENDERING
    # =========================================================================

    def render(self, invoices: Iterable[Invoice], options: ExportOptions) -> str:
        """Render invoices in the requested format."""
        invoices = list(invoices)
        if options.format == ExportFormat.CSV:
            return self._to_csv(invoices, options)
        return self._to_json(invoices, options)

    @staticmethod
    def field_value(invoice: Invoice, field_key: str) -> str:
        """Display value of one export field. Unknown keys render empty."""
        if field_key == "invoiceNumber":
            return invoice.invoice_number
        if field_key == "clientName":
            return invoice.client.name
        if field_key == "clientEmail":
            return invoice.client.email
        if field_key == "clientPhone":
            return invoice.client.phone
        if field_key == "clientAddress":
            return invoice.client.address
        if field_key == "createdDate":
            return format_day(invoice.created_date)
        if field_key == "dueDate":
            return format_day(invoice.due_date)
        if field_key == "status":
            return invoice.status.value.capitalize()
        if field_key == "items":
            return "; ".join(
                f"{item.description} ({item.quantity} x {format_amount(item.price)})"
                for item in invoice.items
            )
        if field_key == "itemCount":
            return str(len(invoice.items))
        if field_key == "subtotal":
            return f"{invoice.subtotal:.2f}"
        if field_key == "taxPercentage":
            return f"{invoice.tax_percentage:.2f}"
        if field_key == "taxAmount":
            return f"{invoice.tax_amount:.2f}"
        if field_key == "discountAmount":
            return f"{invoice.discount_amount:.2f}"
        if field_key == "total":
            return f"{invoice.total:.2f}"
        if field_key == "notes":
            return invoice.notes
        if field_key == "isOverdue":
            return str(invoice.is_overdue).lower()
        if field_key == "daysPastDue":
            return str(invoice.days_past_due)
        return ""

    def _to_csv(self, invoices: list[Invoice], options: ExportOptions) -> str:
        fields = options.fields
        output = io.StringIO()
        writer = csv.writer(output, delimiter=options.separator, lineterminator="\r\n")
        if options.include_header:
            writer.writerow([AVAILABLE_FIELDS.get(key, key) for key in fields])
        for invoice in invoices:
            writer.writerow([self.field_value(invoice, key) for key in fields])
        return output.getvalue()

    def _to_json(self, invoices: list[Invoice], options: ExportOptions) -> str:
        fields = options.fields
        data = {
            "exportInfo": {
                "exportedAt": now_utc().isoformat(),
                "totalRecords": len(invoices),
                "format": "JSON",
                "version": EXPORT_VERSION,
            },
            "invoices": [
                {key: self.field_value(invoice, key) for key in fields}
                for invoice in invoices
            ],
        }
        if options.pretty_json:
            return json.dumps(data, indent=2, ensure_ascii=False)
        return json.dumps(data, ensure_ascii=False)

    # =========================================================================
    # FILES
    # =========================================================================

    def export_invoices(
        self,
        invoices: Iterable[Invoice],
        options: ExportOptions,
        directory: str | Path,
        selected_ids: Iterable[str] | None = None,
    ) -> ExportResult:
        """
        Filter, render and write invoices to a file in directory.

        Never raises: failures come back as an unsuccessful ExportResult.
        """
        try:
            filtered = self.filter_invoices(invoices, options, selected_ids)
            if not filtered:
                return ExportResult.error("No invoices match the export criteria", options.format)

            content = self.render(filtered, options)
            file_name = options.custom_file_name or self.file_name(options.format)
            path = Path(directory) / file_name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

            logger.info("Exported %d invoice(s) to %s", len(filtered), path)
            return ExportResult(
                file_path=str(path),
                file_name=path.name,
                format=options.format,
                record_count=len(filtered),
                file_size_bytes=path.stat().st_size,
                exported_at=now_utc(),
                success=True,
            )
        except Exception as e:
            logger.exception("Invoice export failed")
            return ExportResult.error(f"Export failed: {e}", options.format)

    @staticmethod
    def file_name(export_format: ExportFormat, when: datetime | None = None) -> str:
        """invoices_export_YYYYMMDD_HHMM.<ext>"""
        when = when or now_utc()
        return f"invoices_export_{when:%Y%m%d}_{when:%H%M}.{export_format.value}"

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def statistics(self, invoices: Iterable[Invoice]) -> ExportStatistics:
        invoices = list(invoices)
        total_amount = sum((inv.total for inv in invoices), ZERO)
        paid_amount = sum(
            (inv.total for inv in invoices if inv.status == InvoiceStatus.PAID), ZERO
        )
        return ExportStatistics(
            total_invoices=len(invoices),
            total_amount=total_amount,
            paid_amount=paid_amount,
            pending_amount=total_amount - paid_amount,
            status_counts={
                status: sum(1 for inv in invoices if inv.status == status)
                for status in InvoiceStatus
            },
            overdue_count=sum(1 for inv in invoices if inv.is_overdue),
        )

    # =========================================================================
    # IMPORT
    # =========================================================================

    def import_from_csv(self, path: str | Path) -> list[Invoice]:
        """
        Read invoices back from an exported CSV file.

        Rows are matched to columns by header label. Files without the
        Invoice Number, Client Name and Total Amount columns yield nothing;
        rows that fail to parse are skipped. Items are not reconstructed.

        Raises:
            ValueError: If the file is empty
            OSError: If the file cannot be read
        """
        content = Path(path).read_text(encoding="utf-8")
        rows = list(csv.reader(io.StringIO(content)))
        if not rows:
            raise ValueError("CSV file is empty")

        header = [cell.strip() for cell in rows[0]]
        invoices = []
        for row in rows[1:]:
            if not any(cell.strip() for cell in row):
                continue
            invoice = self._parse_row(header, row)
            if invoice is not None:
                invoices.append(invoice)

        logger.info("Imported %d invoice(s) from %s", len(invoices), path)
        return invoices

    def _parse_row(self, header: list[str], row: list[str]) -> Invoice | None:
        required = ("Invoice Number", "Client Name", "Total Amount")
        if any(label not in header for label in required):
            return None

        def value(label: str) -> str | None:
            if label not in header:
                return None
            index = header.index(label)
            if index >= len(row):
                return None
            cell = row[index].strip()
            return cell or None

        try:
            client = Client(
                id="",
                name=row[header.index("Client Name")],
                email=value("Client Email") or "",
                phone=value("Client Phone") or "",
                address=value("Client Address") or "",
            )
            return Invoice(
                id="",
                invoice_number=row[header.index("Invoice Number")],
                client=client,
                items=(),
                created_date=_parse_day(value("Issue Date")) or now_utc(),
                due_date=_parse_day(value("Due Date")) or days_from_now(30),
                tax_percentage=_parse_decimal(value("Tax %")),
                discount_amount=_parse_decimal(value("Discount")),
                status=_parse_status(value("Status")),
                notes=value("Notes") or "",
            )
        except (IndexError, ValueError):
            logger.warning("Skipping unparseable CSV row: %r", row)
            return None


def _parse_day(text: str | None) -> datetime | None:
    """DD/MM/YYYY to a UTC midnight datetime, or None."""
    if not text:
        return None
    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(part) for part in parts)
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_decimal(text: str | None) -> Decimal:
    if not text:
        return ZERO
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ZERO
    return value if value.is_finite() else ZERO


def _parse_status(text: str | None) -> InvoiceStatus:
    try:
        return InvoiceStatus((text or "draft").lower())
    except ValueError:
        return InvoiceStatus.DRAFT
