# operations/services/fields.py

"""
Input normalizers for transaction services.

The request layer hands us a field set (ids, numbers, dates, text); these
helpers turn it into model-ready values or raise a field-level
ValidationError.
"""

from __future__ import annotations

from datetime import date, datetime

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date


def reject_unknown(data: dict, allowed) -> None:
    unknown = set(data) - set(allowed)
    if unknown:
        raise ValidationError({"detail": f"Unknown field(s): {sorted(unknown)}"})


def resolve(model, value, *, field_name: str):
    """
    Load a related row by id (or by instance) with a fresh DB read.

    Missing / unknown ids become ValidationError({field_name: ...}).
    """
    if value is None or value == "":
        raise ValidationError({field_name: f"{field_name} is required"})

    pk = value.pk if isinstance(value, model) else value
    if isinstance(pk, bool):
        raise ValidationError({field_name: f"The selected {field_name} is invalid."})

    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError) as exc:
        raise ValidationError({field_name: f"The selected {field_name} is invalid."}) from exc


def to_date(value, *, field_name: str) -> date:
    if value is None or value == "":
        raise ValidationError({field_name: f"{field_name} is required"})
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({field_name: f"{field_name} must be a valid date (YYYY-MM-DD)"})
    return parsed


def to_optional_date(value, *, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    return to_date(value, field_name=field_name)


def clean_notes(value) -> str:
    return "" if value is None else str(value).strip()


def clean_number(value, *, field_name: str) -> str | None:
    """Caller-supplied document number; blank means 'generate one'."""
    if value is None:
        return None
    number = str(value).strip()
    if len(number) > 32:
        raise ValidationError({field_name: f"{field_name} may not exceed 32 characters"})
    return number or None
