"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_utc, assume_utc, parse_iso, today_utc, days_from_now, format_day
from utils.currency import format_amount, format_invoice_amount, parse_amount
