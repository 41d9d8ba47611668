# customers/services/customer_service.py

"""
CUSTOMER SERVICE

Purpose:
- Create / update customers with field-level validation.
- Refuse deletion while Incoming or Invoice rows reference the customer.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.db.models import ProtectedError

from customers.models import Customer
from inventory.services.exceptions import ReferentialIntegrityError

logger = logging.getLogger(__name__)

_TEXT_LIMITS = {
    "name": 255,
    "email": 255,
    "phone": 20,
    "address": 10_000,
    "contact_person": 255,
}


def _clean(data: dict, *, creating: bool) -> dict:
    unknown = set(data) - set(_TEXT_LIMITS) - {"is_active"}
    if unknown:
        raise ValidationError({"detail": f"Unknown field(s): {sorted(unknown)}"})

    if creating and "name" not in data:
        raise ValidationError({"name": "name is required"})

    cleaned = {}
    for field, limit in _TEXT_LIMITS.items():
        if field not in data:
            continue
        value = "" if data[field] is None else str(data[field]).strip()
        if len(value) > limit:
            raise ValidationError({field: f"{field} may not exceed {limit} characters"})
        cleaned[field] = value

    if "name" in cleaned and not cleaned["name"]:
        raise ValidationError({"name": "name is required"})

    if cleaned.get("email"):
        try:
            validate_email(cleaned["email"])
        except ValidationError as exc:
            raise ValidationError({"email": "email must be a valid email address"}) from exc

    if "is_active" in data:
        if not isinstance(data["is_active"], bool):
            raise ValidationError({"is_active": "is_active must be a boolean"})
        cleaned["is_active"] = data["is_active"]

    return cleaned


def create_customer(**data) -> Customer:
    customer = Customer.objects.create(**_clean(data, creating=True))
    logger.info("Customer created", extra={"customer_id": customer.pk})
    return customer


def update_customer(customer: Customer, **data) -> Customer:
    fields = _clean(data, creating=False)
    for name, value in fields.items():
        setattr(customer, name, value)
    customer.save(update_fields=[*fields.keys(), "updated_at"])
    return customer


@transaction.atomic
def delete_customer(customer: Customer) -> None:
    related = {
        "incomings": customer.incomings.count(),
        "invoices": customer.invoices.count(),
    }
    if any(related.values()):
        raise ReferentialIntegrityError(
            "Cannot delete customer with existing incoming or invoices",
            related=related,
        )

    customer_id = customer.pk
    try:
        customer.delete()
    except ProtectedError as exc:
        raise ReferentialIntegrityError(
            "Cannot delete customer: it is referenced by transaction records"
        ) from exc

    logger.info("Customer deleted", extra={"customer_id": customer_id})
