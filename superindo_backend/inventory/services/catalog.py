# inventory/services/catalog.py

"""
MATERIAL / PRODUCT MASTER DATA (APPLICATION SERVICE)

Purpose:
- Create / update / delete Material and Product rows.
- Keep stock_quantity service-managed: an opening stock is accepted on create,
  but it can NEVER be edited through update (use transactions instead).
- Block deletion while Incoming / Production / Invoice rows reference the item.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from inventory.models import Material, Product, StockItem
from inventory.services.exceptions import ReferentialIntegrityError
from inventory.services.quantities import to_non_negative

logger = logging.getLogger(__name__)

# reverse accessors (related_name) of transaction rows that pin an item
_DELETE_GUARDS = {
    Material: ("incomings", "productions"),
    Product: ("productions", "invoices"),
}

_EDITABLE_FIELDS = ("name", "code", "description", "unit", "unit_price", "is_active")


def _clean_text(value, *, field_name: str, max_length: int, required: bool) -> str:
    text = "" if value is None else str(value).strip()
    if required and not text:
        raise ValidationError({field_name: f"{field_name} is required"})
    if len(text) > max_length:
        raise ValidationError({field_name: f"{field_name} may not exceed {max_length} characters"})
    return text


def _clean_bool(value, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("1", "true", "yes"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("0", "false", "no"):
        return False
    if value in (0, 1):
        return bool(value)
    raise ValidationError({field_name: f"{field_name} must be a boolean"})


def _clean_fields(data: dict) -> dict:
    cleaned = {}
    if "name" in data:
        cleaned["name"] = _clean_text(data["name"], field_name="name", max_length=255, required=True)
    if "code" in data:
        cleaned["code"] = _clean_text(data["code"], field_name="code", max_length=50, required=True)
    if "description" in data:
        cleaned["description"] = _clean_text(
            data["description"], field_name="description", max_length=10_000, required=False
        )
    if "unit" in data:
        cleaned["unit"] = _clean_text(data["unit"], field_name="unit", max_length=20, required=True)
    if "unit_price" in data:
        cleaned["unit_price"] = to_non_negative(data["unit_price"], field_name="unit_price")
    if "is_active" in data:
        cleaned["is_active"] = _clean_bool(data["is_active"], field_name="is_active")
    return cleaned


def _ensure_unique_code(model, code: str, *, exclude_pk=None) -> None:
    qs = model.objects.filter(code=code)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ValidationError({"code": f"The code '{code}' has already been taken."})


@transaction.atomic
def _create_item(model, data: dict) -> StockItem:
    unknown = set(data) - set(_EDITABLE_FIELDS) - {"stock_quantity"}
    if unknown:
        raise ValidationError({"detail": f"Unknown field(s): {sorted(unknown)}"})

    for required in ("name", "code", "unit"):
        if required not in data:
            raise ValidationError({required: f"{required} is required"})

    fields = _clean_fields(data)
    fields["stock_quantity"] = to_non_negative(
        data.get("stock_quantity", Decimal("0.00")), field_name="stock_quantity"
    )
    _ensure_unique_code(model, fields["code"])

    try:
        item = model.objects.create(**fields)
    except IntegrityError as exc:
        raise ValidationError({"code": f"The code '{fields['code']}' has already been taken."}) from exc

    logger.info(
        "Stock item created",
        extra={"model": model._meta.label, "item_id": item.pk, "opening_stock": str(item.stock_quantity)},
    )
    return item


@transaction.atomic
def _update_item(item: StockItem, data: dict) -> StockItem:
    if "stock_quantity" in data:
        raise ValidationError(
            {
                "stock_quantity": (
                    "stock_quantity cannot be edited directly. "
                    "Record an incoming, production or invoice instead."
                )
            }
        )

    unknown = set(data) - set(_EDITABLE_FIELDS)
    if unknown:
        raise ValidationError({"detail": f"Unknown field(s): {sorted(unknown)}"})

    fields = _clean_fields(data)
    if "code" in fields:
        _ensure_unique_code(type(item), fields["code"], exclude_pk=item.pk)

    for name, value in fields.items():
        setattr(item, name, value)

    try:
        item.save(update_fields=[*fields.keys(), "updated_at"])
    except IntegrityError as exc:
        raise ValidationError({"code": f"The code '{item.code}' has already been taken."}) from exc

    return item


@transaction.atomic
def _delete_item(item: StockItem) -> None:
    related = {
        accessor: getattr(item, accessor).count()
        for accessor in _DELETE_GUARDS[type(item)]
    }
    if any(related.values()):
        kind = type(item)._meta.verbose_name
        names = " or ".join(accessor for accessor in _DELETE_GUARDS[type(item)])
        raise ReferentialIntegrityError(
            f"Cannot delete {kind} with existing {names}",
            related=related,
        )

    try:
        item.delete()
    except ProtectedError as exc:
        raise ReferentialIntegrityError(
            f"Cannot delete {type(item)._meta.verbose_name}: it is referenced by transaction records"
        ) from exc

    logger.info("Stock item deleted", extra={"model": type(item)._meta.label})


def create_material(**data) -> Material:
    return _create_item(Material, data)


def update_material(material: Material, **data) -> Material:
    return _update_item(material, data)


def delete_material(material: Material) -> None:
    _delete_item(material)


def create_product(**data) -> Product:
    return _create_item(Product, data)


def update_product(product: Product, **data) -> Product:
    return _update_item(product, data)


def delete_product(product: Product) -> None:
    _delete_item(product)
