"""Stablecoin amount conversion between decimal strings and fixed-point integer units."""
from decimal import Decimal, InvalidOperation

from accessgate.core.errors import ValidationError


def parse_units(amount: str | int | Decimal, decimals: int = 6) -> int:
    """
    "1.5" -> 1_500_000 for 6 decimals. Exact: more fractional digits than the
    token supports, negatives and non-numbers raise ValidationError.
    """
    if isinstance(amount, float):
        raise ValidationError("Amount must be a decimal string, not float", detail={"amount": amount})
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValidationError("Amount is not a number", detail={"amount": str(amount)}) from e
    if not value.is_finite() or value < 0:
        raise ValidationError("Amount must be a non-negative number", detail={"amount": str(amount)})
    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValidationError(
            f"Amount has more than {decimals} decimal places",
            detail={"amount": str(amount)},
        )
    return int(scaled)


def format_units(units: int, decimals: int = 6) -> str:
    """1_500_000 -> "1.5" for 6 decimals."""
    value = Decimal(units).scaleb(-decimals)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_usdc(units: int, decimals: int = 6) -> str:
    """Display string with two decimals, e.g. 1_500_000 -> "1.50 USDC"."""
    value = Decimal(units).scaleb(-decimals)
    return f"{value.quantize(Decimal('0.01'))} USDC"
