"""Indonesian (id-ID) presentation helpers for amounts inside generated prose."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_currency(amount: float) -> str:
    """
    Render an amount in Rupiah with dot thousands separators and no decimals.

    Args:
        amount: Monetary value; fractions are rounded half away from zero.
    Returns:
        Strings such as "Rp1.500.000" or "-Rp250.000".
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", ".")
    return f"{sign}Rp{grouped}"


def format_decimal(value: float, digits: int = 1) -> str:
    """Fixed-point number with a comma decimal separator, e.g. 2,5."""
    quantum = Decimal(1).scaleb(-digits) if digits > 0 else Decimal("1")
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded}".replace(".", ",")


def format_percent(value: float, digits: int = 1) -> str:
    """Percent with a comma decimal separator, e.g. 12,5%."""
    return format_decimal(value, digits) + "%"
