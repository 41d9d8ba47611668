# inventory/tests/test_stock_ledger.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase

from inventory.models import Material, Product
from inventory.services.exceptions import InsufficientStockError
from inventory.services.quantities import line_total, to_quantity
from inventory.services.stock_ledger import (
    add_stock,
    has_enough_stock,
    lock_stock_items,
    reduce_stock,
)


class StockLedgerTests(TestCase):
    """
    Stock ledger tests.

    GUARANTEES:
    - Stock quantities are never negative
    - reduce_stock refuses to overdraw and reports available vs required
    - has_enough_stock is a pure check
    """

    def setUp(self):
        self.material = Material.objects.create(
            name="Tepung Terigu",
            code="MAT001",
            unit="kg",
            stock_quantity=Decimal("100.00"),
            unit_price=Decimal("12000.00"),
        )
        self.product = Product.objects.create(
            name="Roti Tawar",
            code="PRD001",
            unit="pcs",
            stock_quantity=Decimal("50.00"),
            unit_price=Decimal("8000.00"),
        )

    # ======================================================
    # CHECK
    # ======================================================

    def test_has_enough_stock_up_to_and_including_current(self):
        self.assertTrue(has_enough_stock(self.material, Decimal("0.01")))
        self.assertTrue(has_enough_stock(self.material, Decimal("100.00")))
        self.assertTrue(has_enough_stock(self.material, 0))

    def test_has_enough_stock_false_above_current(self):
        self.assertFalse(has_enough_stock(self.material, Decimal("100.01")))
        self.assertFalse(has_enough_stock(self.product, 51))

    def test_has_enough_stock_does_not_mutate(self):
        has_enough_stock(self.material, 30)
        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("100.00"))

    # ======================================================
    # ADD
    # ======================================================

    def test_add_stock_increments_and_refreshes_instance(self):
        add_stock(self.material, "50")

        self.assertEqual(self.material.stock_quantity, Decimal("150.00"))
        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("150.00"))

    def test_add_stock_keeps_two_decimal_places(self):
        add_stock(self.product, Decimal("0.25"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, Decimal("50.25"))

    def test_add_stock_rejects_non_positive_quantity(self):
        for bad in (0, -5, "", None, "abc", True):
            with self.assertRaises(ValidationError):
                add_stock(self.material, bad)

        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("100.00"))

    def test_add_stock_requires_saved_item(self):
        with self.assertRaises(ValidationError):
            add_stock(Material(name="Unsaved", code="X", unit="kg"), 1)

    # ======================================================
    # REDUCE
    # ======================================================

    def test_reduce_stock_decrements(self):
        reduce_stock(self.material, 30)
        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("70.00"))

    def test_reduce_stock_to_exactly_zero(self):
        reduce_stock(self.product, Decimal("50.00"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, Decimal("0.00"))

    def test_reduce_stock_insufficient_raises_and_leaves_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            reduce_stock(self.product, 60)

        err = ctx.exception
        self.assertEqual(err.available, Decimal("50.00"))
        self.assertEqual(err.required, Decimal("60.00"))
        self.assertIn("Available: 50.00", str(err))
        self.assertIn("Required: 60.00", str(err))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, Decimal("50.00"))

    def test_reduce_stock_uses_database_value_not_stale_instance(self):
        stale = Material.objects.get(pk=self.material.pk)
        reduce_stock(self.material, 90)

        # stale instance still says 100, but only 10 is on hand
        with self.assertRaises(InsufficientStockError):
            reduce_stock(stale, 20)

    def test_label_is_used_in_message(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            reduce_stock(self.material, 500, label="material stock")
        self.assertTrue(str(ctx.exception).startswith("Insufficient material stock."))

    # ======================================================
    # LOCKING
    # ======================================================

    def test_lock_stock_items_keeps_order_and_dedupes(self):
        other = Material.objects.get(pk=self.material.pk)
        locked = lock_stock_items(self.product, self.material, None, other)

        self.assertEqual(len(locked), 4)
        self.assertEqual(locked[0].pk, self.product.pk)
        self.assertIsInstance(locked[0], Product)
        self.assertIsNone(locked[2])
        self.assertIs(locked[1], locked[3])

    # ======================================================
    # DATABASE GUARD
    # ======================================================

    def test_database_rejects_negative_stock(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Material.objects.filter(pk=self.material.pk).update(stock_quantity=Decimal("-1.00"))

    def test_is_low_stock_below_threshold(self):
        self.assertFalse(self.material.is_low_stock)
        reduce_stock(self.material, Decimal("90.01"))
        self.assertTrue(self.material.is_low_stock)

    # ======================================================
    # COLUMN BOUNDS (DecimalField(12, 2))
    # ======================================================

    def test_out_of_range_quantity_is_a_field_error(self):
        for value in ("1e30", "10000000000", "-1e30", "9999999999.999"):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError) as ctx:
                    to_quantity(value)
                self.assertIn("quantity", ctx.exception.message_dict)

        self.assertEqual(to_quantity("9999999999.99"), Decimal("9999999999.99"))

    def test_line_total_rejects_overflowing_total(self):
        with self.assertRaises(ValidationError) as ctx:
            line_total(Decimal("9999999999.00"), Decimal("1000.00"))
        self.assertIn("total_price", ctx.exception.message_dict)

    def test_add_stock_refuses_to_pass_column_ceiling(self):
        Material.objects.filter(pk=self.material.pk).update(stock_quantity=Decimal("9999999990.00"))
        self.material.refresh_from_db()

        with self.assertRaises(ValidationError) as ctx:
            add_stock(self.material, 10)
        self.assertIn("stock_quantity", ctx.exception.message_dict)

        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("9999999990.00"))

        add_stock(self.material, Decimal("9.99"))
        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("9999999999.99"))
