# operations/tests/test_invoice.py

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from customers.models import Customer
from inventory.models import Product
from inventory.services.exceptions import InsufficientStockError
from operations.models import Invoice
from operations.services import (
    create_invoice,
    delete_invoice,
    update_invoice,
    update_invoice_status,
)

DAY = date(2025, 7, 21)


class InvoiceServiceTests(TestCase):
    """
    Invoice (product sale) tests.

    GUARANTEES:
    - create requires product stock >= quantity and takes it out
    - update applies the delta; increases are checked first
    - status changes never touch stock
    - delete returns the quantity
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="PT Sukses Mandiri")
        self.product = Product.objects.create(
            name="Biskuit Coklat",
            code="PRD003",
            unit="pack",
            stock_quantity=Decimal("50.00"),
            unit_price=Decimal("12000.00"),
        )

    def _create(self, quantity=20, **overrides):
        data = {
            "customer_id": self.customer.pk,
            "product_id": self.product.pk,
            "quantity": quantity,
            "unit_price": "12000",
            "invoice_date": DAY,
            "on_date": DAY,
        }
        data.update(overrides)
        return create_invoice(**data)

    def _stock(self, product=None):
        product = product or self.product
        product.refresh_from_db()
        return product.stock_quantity

    # ======================================================
    # CREATE
    # ======================================================

    def test_create_reduces_stock(self):
        invoice = self._create(quantity=20)

        self.assertEqual(invoice.invoice_number, "INV202507210001")
        self.assertEqual(invoice.status, Invoice.STATUS_DRAFT)
        self.assertEqual(invoice.total_price, Decimal("240000.00"))
        self.assertIsNone(invoice.due_date)
        self.assertEqual(self._stock(), Decimal("30.00"))

    def test_create_insufficient_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            self._create(quantity=60)

        self.assertEqual(
            str(ctx.exception),
            "Insufficient product stock. Available: 50.00, Required: 60.00",
        )
        self.assertEqual(self._stock(), Decimal("50.00"))
        self.assertFalse(Invoice.objects.exists())

    def test_create_validates_due_date(self):
        with self.assertRaises(ValidationError) as ctx:
            self._create(due_date=date(2025, 7, 20))
        self.assertIn("due_date", ctx.exception.message_dict)

        invoice = self._create(due_date="2025-07-21")
        self.assertEqual(invoice.due_date, DAY)

    def test_create_validates_status(self):
        with self.assertRaises(ValidationError):
            self._create(status="refunded")

        invoice = self._create(status="PAID")
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)

    # ======================================================
    # UPDATE
    # ======================================================

    def test_update_increase_within_stock(self):
        invoice = self._create(quantity=20)  # stock 30
        updated = update_invoice(invoice, quantity=45)

        self.assertEqual(updated.total_price, Decimal("540000.00"))
        self.assertEqual(self._stock(), Decimal("5.00"))

    def test_update_increase_beyond_stock_persists_nothing(self):
        invoice = self._create(quantity=20)  # stock 30

        with self.assertRaises(InsufficientStockError) as ctx:
            update_invoice(invoice, quantity=60, notes="too many")

        self.assertEqual(
            str(ctx.exception),
            "Insufficient product stock. Available: 30.00, Additional Required: 40.00",
        )
        invoice.refresh_from_db()
        self.assertEqual(invoice.quantity, Decimal("20.00"))
        self.assertEqual(invoice.notes, "")
        self.assertEqual(self._stock(), Decimal("30.00"))

    def test_update_decrease_returns_stock(self):
        invoice = self._create(quantity=20)
        update_invoice(invoice, quantity=5)
        self.assertEqual(self._stock(), Decimal("45.00"))

    def test_update_same_quantity_is_stock_neutral(self):
        invoice = self._create(quantity=20)
        update_invoice(invoice, quantity=20, unit_price=11000, status="sent")

        invoice.refresh_from_db()
        self.assertEqual(invoice.total_price, Decimal("220000.00"))
        self.assertEqual(invoice.status, Invoice.STATUS_SENT)
        self.assertEqual(self._stock(), Decimal("30.00"))

    def test_update_switches_product(self):
        other = Product.objects.create(
            name="Kue Kering",
            code="PRD004",
            unit="pack",
            stock_quantity=Decimal("80.00"),
        )
        invoice = self._create(quantity=20)
        update_invoice(invoice, product_id=other.pk, quantity=25)

        self.assertEqual(self._stock(), Decimal("50.00"))
        self.assertEqual(self._stock(other), Decimal("55.00"))

    def test_update_switch_to_short_product_fails(self):
        other = Product.objects.create(
            name="Kue Kering",
            code="PRD004",
            unit="pack",
            stock_quantity=Decimal("10.00"),
        )
        invoice = self._create(quantity=20)

        with self.assertRaises(InsufficientStockError):
            update_invoice(invoice, product_id=other.pk)

        invoice.refresh_from_db()
        self.assertEqual(invoice.product_id, self.product.pk)
        self.assertEqual(self._stock(), Decimal("30.00"))
        self.assertEqual(self._stock(other), Decimal("10.00"))

    # ======================================================
    # STATUS
    # ======================================================

    def test_status_changes_are_stock_neutral(self):
        invoice = self._create(quantity=20)

        for status in ("sent", "paid", "cancelled", "draft"):
            update_invoice_status(invoice, status)
            invoice.refresh_from_db()
            self.assertEqual(invoice.status, status)
            self.assertEqual(self._stock(), Decimal("30.00"))

    def test_status_rejects_unknown_value(self):
        invoice = self._create()
        with self.assertRaises(ValidationError):
            update_invoice_status(invoice, "void")

    # ======================================================
    # DELETE
    # ======================================================

    def test_create_then_delete_restores_stock(self):
        invoice = self._create(quantity=20)
        delete_invoice(invoice)

        self.assertEqual(self._stock(), Decimal("50.00"))
        self.assertFalse(Invoice.objects.exists())

    def test_delete_cancelled_invoice_still_returns_stock(self):
        invoice = self._create(quantity=20)
        update_invoice_status(invoice, Invoice.STATUS_CANCELLED)
        delete_invoice(invoice)
        self.assertEqual(self._stock(), Decimal("50.00"))
