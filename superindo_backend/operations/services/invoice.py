# operations/services/invoice.py

"""
======================================================
PATH: operations/services/invoice.py
======================================================
INVOICE TRANSITIONS (PRODUCT SALE)

create:  lock product -> require product stock >= quantity -> number
         -> total_price -> persist -> reduce_stock(product, quantity)
update:  delta = new - old
         - delta > 0 requires product stock >= delta BEFORE anything is written
         - persist (total_price recomputed)
         - delta > 0 -> reduce_stock(delta); delta < 0 -> add_stock(-delta); 0 -> no-op
         - product changed -> add old quantity back to the old product,
           take the full new quantity from the new product
delete:  add_stock(product, quantity) -> delete row (always succeeds)

status:  update_invoice_status() is stock-neutral; any status may move to any other.
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from customers.models import Customer
from inventory.models import Product
from inventory.services.exceptions import InsufficientStockError
from inventory.services.quantities import line_total, to_non_negative, to_quantity
from inventory.services.stock_ledger import add_stock, has_enough_stock, lock_stock_items, reduce_stock
from operations.models import Invoice
from operations.services.fields import (
    clean_notes,
    clean_number,
    reject_unknown,
    resolve,
    to_date,
    to_optional_date,
)
from operations.services.numbering import next_invoice_number

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "customer_id",
    "product_id",
    "quantity",
    "unit_price",
    "invoice_date",
    "due_date",
    "status",
    "notes",
)

VALID_STATUSES = tuple(value for value, _ in Invoice.STATUS_CHOICES)


def _clean_status(value) -> str:
    status = ("" if value is None else str(value)).strip().lower()
    if status not in VALID_STATUSES:
        raise ValidationError({"status": f"status must be one of: {', '.join(VALID_STATUSES)}"})
    return status


def _check_due_date(invoice_date: date, due_date: date | None) -> None:
    if due_date is not None and due_date < invoice_date:
        raise ValidationError({"due_date": "due_date must be a date after or equal to invoice_date"})


def _save_new(invoice: Invoice) -> None:
    try:
        with transaction.atomic():
            invoice.save(force_insert=True)
    except IntegrityError as exc:
        raise ValidationError(
            {"invoice_number": f"The invoice number '{invoice.invoice_number}' has already been taken."}
        ) from exc


@transaction.atomic
def create_invoice(
    *,
    customer_id,
    product_id,
    quantity,
    unit_price,
    invoice_date,
    due_date=None,
    status: str = Invoice.STATUS_DRAFT,
    notes: str = "",
    invoice_number: str | None = None,
    on_date: date | None = None,
) -> Invoice:
    customer = resolve(Customer, customer_id, field_name="customer_id")
    product = resolve(Product, product_id, field_name="product_id")
    qty = to_quantity(quantity, field_name="quantity")
    price = to_non_negative(unit_price, field_name="unit_price")
    day = to_date(invoice_date, field_name="invoice_date")
    due = to_optional_date(due_date, field_name="due_date")
    _check_due_date(day, due)
    clean_status = _clean_status(status)

    (product,) = lock_stock_items(product)
    if not has_enough_stock(product, qty):
        raise InsufficientStockError(
            available=product.stock_quantity,
            required=qty,
            label="product stock",
        )

    invoice = Invoice(
        invoice_number=clean_number(invoice_number, field_name="invoice_number")
        or next_invoice_number(on_date=on_date),
        customer=customer,
        product=product,
        quantity=qty,
        unit_price=price,
        total_price=line_total(qty, price),
        invoice_date=day,
        due_date=due,
        status=clean_status,
        notes=clean_notes(notes),
    )
    _save_new(invoice)

    reduce_stock(product, qty, label="product stock")

    logger.info(
        "Invoice created",
        extra={"invoice_number": invoice.invoice_number, "product_id": product.pk, "quantity": str(qty)},
    )
    return invoice


@transaction.atomic
def update_invoice(invoice: Invoice, **changes) -> Invoice:
    reject_unknown(changes, UPDATABLE_FIELDS)

    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    old_qty = invoice.quantity

    customer = (
        resolve(Customer, changes["customer_id"], field_name="customer_id")
        if "customer_id" in changes
        else invoice.customer
    )
    new_product = (
        resolve(Product, changes["product_id"], field_name="product_id")
        if "product_id" in changes
        else invoice.product
    )
    new_qty = to_quantity(changes["quantity"], field_name="quantity") if "quantity" in changes else old_qty
    price = (
        to_non_negative(changes["unit_price"], field_name="unit_price")
        if "unit_price" in changes
        else invoice.unit_price
    )
    day = (
        to_date(changes["invoice_date"], field_name="invoice_date")
        if "invoice_date" in changes
        else invoice.invoice_date
    )
    due = (
        to_optional_date(changes["due_date"], field_name="due_date")
        if "due_date" in changes
        else invoice.due_date
    )
    _check_due_date(day, due)
    status = _clean_status(changes["status"]) if "status" in changes else invoice.status

    old_product, new_product = lock_stock_items(invoice.product, new_product)
    product_changed = old_product.pk != new_product.pk

    # validate before anything is written
    delta = new_qty - old_qty
    if product_changed:
        if not has_enough_stock(new_product, new_qty):
            raise InsufficientStockError(
                available=new_product.stock_quantity,
                required=new_qty,
                label="product stock",
            )
    elif delta > 0 and not has_enough_stock(new_product, delta):
        raise InsufficientStockError(
            available=new_product.stock_quantity,
            required=delta,
            label="product stock",
            required_label="Additional Required",
        )

    invoice.customer = customer
    invoice.product = new_product
    invoice.quantity = new_qty
    invoice.unit_price = price
    invoice.total_price = line_total(new_qty, price)
    invoice.invoice_date = day
    invoice.due_date = due
    invoice.status = status
    if "notes" in changes:
        invoice.notes = clean_notes(changes["notes"])
    invoice.save()

    if product_changed:
        add_stock(old_product, old_qty)
        reduce_stock(new_product, new_qty, label="product stock")
    elif delta > 0:
        reduce_stock(new_product, delta, label="product stock")
    elif delta < 0:
        add_stock(new_product, -delta)

    logger.info(
        "Invoice updated",
        extra={
            "invoice_number": invoice.invoice_number,
            "old_quantity": str(old_qty),
            "new_quantity": str(new_qty),
        },
    )
    return invoice


@transaction.atomic
def update_invoice_status(invoice: Invoice, status) -> Invoice:
    """Informational status change; no stock side effects, no transition rules."""
    clean_status = _clean_status(status)

    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    previous = invoice.status
    invoice.status = clean_status
    invoice.save(update_fields=["status", "updated_at"])

    logger.info(
        "Invoice status updated",
        extra={"invoice_number": invoice.invoice_number, "status": f"{previous} -> {clean_status}"},
    )
    return invoice


@transaction.atomic
def delete_invoice(invoice: Invoice) -> None:
    """Return the invoiced quantity to product stock, then delete."""
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    (product,) = lock_stock_items(invoice.product)

    add_stock(product, invoice.quantity)
    number = invoice.invoice_number
    invoice.delete()

    logger.info("Invoice deleted", extra={"invoice_number": number})
