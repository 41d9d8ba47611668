# operations/services/production.py

"""
======================================================
PATH: operations/services/production.py
======================================================
PRODUCTION TRANSITIONS (MATERIAL -> PRODUCT)

create:  lock material+product -> require material stock >= used -> number
         -> persist -> reduce_stock(material, used) -> add_stock(product, produced)
update:  reverse old effects (add material back, take product back out)
         -> require NEW material stock >= new used (checked after reversal)
         -> persist -> apply new effects
delete:  reverse effects -> delete row
         (fails if the product was already sold below `produced`)

All steps of one transition share a single transaction.atomic block.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from inventory.models import Material, Product
from inventory.services.exceptions import InsufficientStockError
from inventory.services.quantities import to_quantity
from inventory.services.stock_ledger import add_stock, has_enough_stock, lock_stock_items, reduce_stock
from operations.models import Production
from operations.services.fields import clean_notes, clean_number, reject_unknown, resolve, to_date
from operations.services.numbering import next_production_number

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "material_id",
    "product_id",
    "material_quantity_used",
    "product_quantity_produced",
    "production_date",
    "notes",
)


def _require_material(material: Material, used) -> None:
    if not has_enough_stock(material, used):
        raise InsufficientStockError(
            available=material.stock_quantity,
            required=used,
            label="material stock",
        )


def _save_new(production: Production) -> None:
    try:
        with transaction.atomic():
            production.save(force_insert=True)
    except IntegrityError as exc:
        raise ValidationError(
            {"production_number": f"The production number '{production.production_number}' has already been taken."}
        ) from exc


@transaction.atomic
def create_production(
    *,
    material_id,
    product_id,
    material_quantity_used,
    product_quantity_produced,
    production_date,
    notes: str = "",
    production_number: str | None = None,
    on_date: date | None = None,
) -> Production:
    material = resolve(Material, material_id, field_name="material_id")
    product = resolve(Product, product_id, field_name="product_id")
    used = to_quantity(material_quantity_used, field_name="material_quantity_used")
    produced = to_quantity(product_quantity_produced, field_name="product_quantity_produced")
    day = to_date(production_date, field_name="production_date")

    material, product = lock_stock_items(material, product)
    _require_material(material, used)

    production = Production(
        production_number=clean_number(production_number, field_name="production_number")
        or next_production_number(on_date=on_date),
        material=material,
        product=product,
        material_quantity_used=used,
        product_quantity_produced=produced,
        production_date=day,
        notes=clean_notes(notes),
    )
    _save_new(production)

    reduce_stock(material, used, label="material stock")
    add_stock(product, produced)

    logger.info(
        "Production created",
        extra={
            "production_number": production.production_number,
            "material_used": str(used),
            "product_produced": str(produced),
        },
    )
    return production


@transaction.atomic
def update_production(production: Production, **changes) -> Production:
    """
    Partial update. The old run is fully reversed before the new one is
    validated and applied, so material/product may also be switched.
    """
    reject_unknown(changes, UPDATABLE_FIELDS)

    production = Production.objects.select_for_update().get(pk=production.pk)
    old_used = production.material_quantity_used
    old_produced = production.product_quantity_produced

    new_material = (
        resolve(Material, changes["material_id"], field_name="material_id")
        if "material_id" in changes
        else production.material
    )
    new_product = (
        resolve(Product, changes["product_id"], field_name="product_id")
        if "product_id" in changes
        else production.product
    )
    new_used = (
        to_quantity(changes["material_quantity_used"], field_name="material_quantity_used")
        if "material_quantity_used" in changes
        else old_used
    )
    new_produced = (
        to_quantity(changes["product_quantity_produced"], field_name="product_quantity_produced")
        if "product_quantity_produced" in changes
        else old_produced
    )

    old_material, old_product, new_material, new_product = lock_stock_items(
        production.material, production.product, new_material, new_product
    )

    # 1) reverse the recorded run
    add_stock(old_material, old_used)
    reduce_stock(old_product, old_produced, label="product stock")

    # 2) validate against the reversed stock
    _require_material(new_material, new_used)

    # 3) persist
    production.material = new_material
    production.product = new_product
    production.material_quantity_used = new_used
    production.product_quantity_produced = new_produced
    if "production_date" in changes:
        production.production_date = to_date(changes["production_date"], field_name="production_date")
    if "notes" in changes:
        production.notes = clean_notes(changes["notes"])
    production.save()

    # 4) apply the new run
    reduce_stock(new_material, new_used, label="material stock")
    add_stock(new_product, new_produced)

    logger.info(
        "Production updated",
        extra={
            "production_number": production.production_number,
            "material_used": f"{old_used} -> {new_used}",
            "product_produced": f"{old_produced} -> {new_produced}",
        },
    )
    return production


@transaction.atomic
def delete_production(production: Production) -> None:
    production = Production.objects.select_for_update().get(pk=production.pk)
    material, product = lock_stock_items(production.material, production.product)

    add_stock(material, production.material_quantity_used)
    reduce_stock(product, production.product_quantity_produced, label="product stock")

    number = production.production_number
    production.delete()

    logger.info("Production deleted", extra={"production_number": number})
