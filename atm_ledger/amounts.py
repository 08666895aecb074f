"""
Monetary Amount Module

Decimal helpers for the two-place amounts the ledger and its store use.
NEVER uses float for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Union

# Set global decimal context for financial precision
getcontext().prec = 28

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')


def quantize_amount(value: Union[Decimal, int, str]) -> Decimal:
    """
    Round a value to two decimal places (ROUND_HALF_UP)

    Raises:
        ValueError: If the value is not a number or has too many digits to
            keep two decimal places at the context precision
    """
    try:
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount '{value}' cannot be represented with two decimal places")


def parse_amount(value: str) -> Decimal:
    """
    Convert user or store text to a two-place Decimal

    Args:
        value: String representation of a number, e.g. "250" or "1250.00"

    Returns:
        Quantized Decimal value

    Raises:
        ValueError: If the text is not a finite number
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if not amount.is_finite():
        raise ValueError(f"Amount '{value}' is not a finite number")

    return quantize_amount(amount)


def format_amount(value: Decimal) -> str:
    """Format for display and for the store: plain two-place notation"""
    return f"{quantize_amount(value):.2f}"
