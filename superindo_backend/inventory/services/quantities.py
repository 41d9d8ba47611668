# inventory/services/quantities.py

"""
Decimal normalizers shared by inventory and transaction services.

HARD RULE: quantities and money are 2-place decimals (DecimalField(12, 2)),
line totals are DecimalField(14, 2).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.core.exceptions import ValidationError

TWOPLACES = Decimal("0.01")

# exclusive upper bounds of DecimalField(12, 2) and DecimalField(14, 2)
QUANTITY_LIMIT = Decimal(10) ** 10
TOTAL_LIMIT = Decimal(10) ** 12


def to_decimal(value, *, field_name: str = "value") -> Decimal:
    if value is None or value == "" or value == "null":
        raise ValidationError({field_name: f"{field_name} is required"})
    if isinstance(value, bool):
        # guardrail: bool is an int subclass in Python
        raise ValidationError({field_name: f"{field_name} must be a number"})
    try:
        dec = Decimal(str(value))
        if not dec.is_finite():
            raise ValidationError({field_name: f"{field_name} must be a valid decimal"})
        if abs(dec) < QUANTITY_LIMIT:
            dec = dec.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError({field_name: f"{field_name} must be a valid decimal"}) from exc

    # re-checked after rounding: 9999999999.999 rounds up to the limit
    if abs(dec) >= QUANTITY_LIMIT:
        raise ValidationError({field_name: f"{field_name} must be less than {QUANTITY_LIMIT:,}"})
    return dec


def to_quantity(value, *, field_name: str = "quantity") -> Decimal:
    """Strictly positive quantity (minimum 0.01)."""
    qty = to_decimal(value, field_name=field_name)
    if qty <= Decimal("0.00"):
        raise ValidationError({field_name: f"{field_name} must be at least 0.01"})
    return qty


def to_non_negative(value, *, field_name: str) -> Decimal:
    dec = to_decimal(value, field_name=field_name)
    if dec < Decimal("0.00"):
        raise ValidationError({field_name: f"{field_name} cannot be negative"})
    return dec


def line_total(quantity: Decimal, unit_price: Decimal, *, field_name: str = "total_price") -> Decimal:
    total = (quantity * unit_price).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    if abs(total) >= TOTAL_LIMIT:
        raise ValidationError({field_name: f"{field_name} must be less than {TOTAL_LIMIT:,}"})
    return total


def check_stock_limit(quantity: Decimal, *, field_name: str = "stock_quantity") -> Decimal:
    """Resulting on-hand quantity must still fit DecimalField(12, 2)."""
    if quantity >= QUANTITY_LIMIT:
        raise ValidationError({field_name: f"{field_name} would exceed {QUANTITY_LIMIT - TWOPLACES:,}"})
    return quantity
