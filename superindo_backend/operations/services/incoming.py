# operations/services/incoming.py

"""
======================================================
PATH: operations/services/incoming.py
======================================================
INCOMING TRANSITIONS (MATERIAL RECEIPT)

create:  validate -> number -> total_price -> persist -> add_stock(material, quantity)
update:  validate -> persist (total_price recomputed) -> apply quantity delta
         - delta > 0  -> add_stock(material, delta)
         - delta < 0  -> reduce_stock(material, -delta)   (validating path)
         - material changed -> reduce_stock(old, old_qty) + add_stock(new, new_qty)
delete:  reduce_stock(material, quantity) -> delete row

Every transition is ONE transaction.atomic block with the material row(s)
locked up front: a failed stock step rolls the record write back too.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from customers.models import Customer
from inventory.models import Material
from inventory.services.quantities import line_total, to_non_negative, to_quantity
from inventory.services.stock_ledger import add_stock, lock_stock_items, reduce_stock
from operations.models import Incoming
from operations.services.fields import clean_notes, clean_number, reject_unknown, resolve, to_date
from operations.services.numbering import next_incoming_number

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "customer_id",
    "material_id",
    "quantity",
    "unit_price",
    "incoming_date",
    "notes",
)


def _save_new(incoming: Incoming) -> None:
    try:
        with transaction.atomic():
            incoming.save(force_insert=True)
    except IntegrityError as exc:
        raise ValidationError(
            {"incoming_number": f"The incoming number '{incoming.incoming_number}' has already been taken."}
        ) from exc


@transaction.atomic
def create_incoming(
    *,
    customer_id,
    material_id,
    quantity,
    unit_price,
    incoming_date,
    notes: str = "",
    incoming_number: str | None = None,
    on_date: date | None = None,
) -> Incoming:
    """
    Record a material delivery and add it to material stock.

    on_date: the day used for number generation (defaults to today).
    """
    customer = resolve(Customer, customer_id, field_name="customer_id")
    material = resolve(Material, material_id, field_name="material_id")
    qty = to_quantity(quantity, field_name="quantity")
    price = to_non_negative(unit_price, field_name="unit_price")
    day = to_date(incoming_date, field_name="incoming_date")

    (material,) = lock_stock_items(material)

    incoming = Incoming(
        incoming_number=clean_number(incoming_number, field_name="incoming_number")
        or next_incoming_number(on_date=on_date),
        customer=customer,
        material=material,
        quantity=qty,
        unit_price=price,
        total_price=line_total(qty, price),
        incoming_date=day,
        notes=clean_notes(notes),
    )
    _save_new(incoming)

    add_stock(material, qty)

    logger.info(
        "Incoming created",
        extra={"incoming_number": incoming.incoming_number, "material_id": material.pk, "quantity": str(qty)},
    )
    return incoming


@transaction.atomic
def update_incoming(incoming: Incoming, **changes) -> Incoming:
    """
    Partial update: fields not passed keep their current values.
    Returns the refreshed Incoming.
    """
    reject_unknown(changes, UPDATABLE_FIELDS)

    incoming = Incoming.objects.select_for_update().get(pk=incoming.pk)
    old_qty = incoming.quantity

    customer = (
        resolve(Customer, changes["customer_id"], field_name="customer_id")
        if "customer_id" in changes
        else incoming.customer
    )
    new_material = (
        resolve(Material, changes["material_id"], field_name="material_id")
        if "material_id" in changes
        else incoming.material
    )
    new_qty = to_quantity(changes["quantity"], field_name="quantity") if "quantity" in changes else old_qty
    price = (
        to_non_negative(changes["unit_price"], field_name="unit_price")
        if "unit_price" in changes
        else incoming.unit_price
    )

    old_material, new_material = lock_stock_items(incoming.material, new_material)

    incoming.customer = customer
    incoming.material = new_material
    incoming.quantity = new_qty
    incoming.unit_price = price
    incoming.total_price = line_total(new_qty, price)
    if "incoming_date" in changes:
        incoming.incoming_date = to_date(changes["incoming_date"], field_name="incoming_date")
    if "notes" in changes:
        incoming.notes = clean_notes(changes["notes"])
    incoming.save()

    if old_material.pk != new_material.pk:
        reduce_stock(old_material, old_qty, label="material stock")
        add_stock(new_material, new_qty)
    else:
        delta = new_qty - old_qty
        if delta > 0:
            add_stock(new_material, delta)
        elif delta < 0:
            reduce_stock(new_material, -delta, label="material stock")

    logger.info(
        "Incoming updated",
        extra={
            "incoming_number": incoming.incoming_number,
            "old_quantity": str(old_qty),
            "new_quantity": str(new_qty),
        },
    )
    return incoming


@transaction.atomic
def delete_incoming(incoming: Incoming) -> None:
    """Take the delivered quantity back out of material stock, then delete."""
    incoming = Incoming.objects.select_for_update().get(pk=incoming.pk)
    (material,) = lock_stock_items(incoming.material)

    reduce_stock(material, incoming.quantity, label="material stock")
    number = incoming.incoming_number
    incoming.delete()

    logger.info("Incoming deleted", extra={"incoming_number": number})
