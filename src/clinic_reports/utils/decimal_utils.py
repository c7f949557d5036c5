"""Decimal utilities for money handling.

All monetary calculations use Decimal to avoid floating-point drift when
summing many small clinic receipts.
"""

import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

ZERO = Decimal("0")

CURRENCY_SYMBOLS = {"€", "$", "£"}

# es-ES groups thousands only from five integer digits onwards ("1234 €", "12.345 €")
_ES_MIN_GROUPING_DIGITS = 5


def parse_amount(raw_amount: str) -> Decimal:
    """Parse a raw amount string from a table export into a Decimal.

    Handles:
    - Plain numbers: 1234.56, -1234.56
    - Currency symbols: 1.234,56 €, €80
    - European format: 1.234,56 (period thousands, comma decimals)
    - US format: 1,234.56

    A lone comma followed by one or two digits is a decimal separator
    ("80,5" is 80.5); followed by three digits it is a thousands separator.

    Args:
        raw_amount: The raw amount string.

    Returns:
        Parsed Decimal (signed).

    Raises:
        ValueError: If the amount cannot be parsed.
    """
    if raw_amount is None or not str(raw_amount).strip():
        raise ValueError("Empty amount string")

    original = raw_amount
    amount_str = str(raw_amount).strip()

    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = amount_str.replace(" ", "").replace("\u00a0", "")

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        if re.search(r",\d{1,2}$", amount_str):
            amount_str = amount_str.replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse amount '{original}': {e}") from e

    if not amount.is_finite():
        raise ValueError(f"Amount is not a finite number: '{original}'")

    return amount


def to_decimal(value: Optional[object], default: Decimal = ZERO) -> Decimal:
    """Convert a store value to Decimal.

    Only absent values (None or an empty string) fall back to the default;
    anything present must be a valid amount.

    Args:
        value: Value to convert (Decimal, int, float, string or None).
        default: Value returned for absent values.

    Returns:
        Decimal value or default.

    Raises:
        ValueError: If a present value is not a finite amount.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default

    if isinstance(value, bool):
        raise ValueError(f"Boolean is not an amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # via str() so 0.1 stays 0.1
        amount = Decimal(str(value))
    elif isinstance(value, str):
        return parse_amount(value)
    else:
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"Amount is not a finite number: {value!r}")
    return amount


def to_quantity(value: Optional[object], default: int = 1) -> int:
    """Convert a store value to a whole, positive line quantity.

    Raises:
        ValueError: If a present value is not an integer of at least 1.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValueError(f"Boolean is not a quantity: {value!r}")

    if isinstance(value, int):
        quantity = value
    else:
        amount = to_decimal(value)
        if amount != amount.to_integral_value():
            raise ValueError(f"Quantity must be a whole number: {value!r}")
        quantity = int(amount)

    if quantity < 1:
        raise ValueError(f"Quantity must be at least 1, got {quantity}")
    return quantity


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts, starting from Decimal zero.

    Args:
        amounts: Iterable of Decimal amounts.

    Returns:
        Sum as Decimal (Decimal("0") for an empty iterable).
    """
    return sum(amounts, ZERO)


def round_half_up(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(
    amount: Decimal,
    decimal_places: int = 2,
    include_sign: bool = True,
) -> str:
    """Format a Decimal amount as a plain number string.

    Args:
        amount: The amount to format.
        decimal_places: Number of decimal places (default 2).
        include_sign: Whether to include the sign for negative amounts.

    Returns:
        Formatted string like "-1234.56" or "1234.56".
    """
    quantize_str = "1" if decimal_places == 0 else "0." + "0" * decimal_places
    rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

    if include_sign and rounded < 0:
        return str(rounded)
    return str(abs(rounded))


def format_eur(amount: Decimal, decimal_places: int = 0, symbol: str = "€") -> str:
    """Format an amount the way the es-ES locale renders euros.

    Examples: 1234 -> "1234 €", 12345 -> "12.345 €", -5000.5 with two
    decimals -> "-5000,50 €".

    Args:
        amount: Amount to format.
        decimal_places: Fraction digits to keep (rounded half-up).
        symbol: Currency symbol appended after a space.

    Returns:
        Locale-style currency string.
    """
    signed = format_currency(amount, decimal_places=decimal_places)
    sign = "-" if signed.startswith("-") else ""
    integer_part, _, fraction = signed.lstrip("-").partition(".")

    if len(integer_part) >= _ES_MIN_GROUPING_DIGITS:
        groups = []
        while integer_part:
            groups.insert(0, integer_part[-3:])
            integer_part = integer_part[:-3]
        integer_part = ".".join(groups)

    text = integer_part if not fraction else f"{integer_part},{fraction}"
    return f"{sign}{text} {symbol}"
