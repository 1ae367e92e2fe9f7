"""
Rupee formatting helpers.

Formatting goes through babel's en_IN locale data: the last three digits,
then pairs (12,34,567.00). The PDF variant swaps the rupee sign for "Rs."
because the embedded PDF fonts lack the glyph.
"""

from decimal import Decimal

from babel.numbers import NumberFormatError, format_currency, format_decimal, parse_decimal

LOCALE = "en_IN"
CURRENCY_SYMBOL = "₹"
PDF_CURRENCY_SYMBOL = "Rs."
CURRENCY_CODE = "INR"

Number = Decimal | float | int


def _pattern(decimal_places: int) -> str:
    """Indian-grouped CLDR number pattern with a fixed number of fraction digits."""
    if decimal_places <= 0:
        return "#,##,##0"
    return "#,##,##0." + "0" * decimal_places


def format_indian_number(number: Number, decimal_places: int = 0) -> str:
    """
    Format a number with Indian digit grouping.

    Args:
        number: Value to format
        decimal_places: Digits after the decimal point

    Returns:
        Grouped string, e.g. 1234567.5 -> "12,34,567.50" with 2 places
    """
    return format_decimal(number, format=_pattern(decimal_places), locale=LOCALE)


def format_amount(amount: Number, show_symbol: bool = True, decimal_places: int = 0) -> str:
    """Format an amount with the rupee sign. Negatives read "-₹250"."""
    if not show_symbol:
        return format_indian_number(amount, decimal_places)
    return format_currency(
        amount,
        CURRENCY_CODE,
        format="¤" + _pattern(decimal_places),
        locale=LOCALE,
        currency_digits=False,
    )


def format_amount_for_pdf(amount: Number, show_symbol: bool = True, decimal_places: int = 2) -> str:
    """Format an amount using the PDF-safe "Rs." prefix."""
    formatted = format_indian_number(amount, decimal_places)
    if not show_symbol:
        return formatted
    if formatted.startswith("-"):
        return f"-{PDF_CURRENCY_SYMBOL}{formatted[1:]}"
    return f"{PDF_CURRENCY_SYMBOL}{formatted}"


def format_compact_amount(amount: Number, show_symbol: bool = True) -> str:
    """
    Compact notation for dashboards.

    1 crore and up -> "Cr", 1 lakh and up -> "L", 1000 and up -> "K".
    """
    symbol = CURRENCY_SYMBOL if show_symbol else ""
    amount = Decimal(str(amount))
    if amount >= 10_000_000:
        return f"{symbol}{amount / 10_000_000:.1f}Cr"
    if amount >= 100_000:
        return f"{symbol}{amount / 100_000:.1f}L"
    if amount >= 1000:
        return f"{symbol}{amount / 1000:.1f}K"
    return format_amount(amount, show_symbol=show_symbol)


def format_invoice_amount(amount: Number) -> str:
    """Amount as printed on invoices: symbol plus two decimals."""
    return format_amount(amount, decimal_places=2)


def format_for_input(amount: Number) -> str:
    """Plain two-decimal rendering for editable fields."""
    return f"{amount:.2f}"


def parse_amount(amount_string: str) -> Decimal:
    """
    Parse a formatted amount back into a Decimal.

    Currency markers are stripped and en_IN grouping is understood.
    Unparseable input yields 0.
    """
    cleaned = (
        amount_string.replace(CURRENCY_SYMBOL, "")
        .replace(PDF_CURRENCY_SYMBOL, "")
        .replace("Rs", "")
        .strip()
    )
    try:
        return parse_decimal(cleaned, locale=LOCALE)
    except NumberFormatError:
        return Decimal("0")
