from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from customers.models import Customer
from inventory.models import Material, Product
from inventory.services import create_material
from operations.models import Incoming


class SeedCommandTests(TestCase):
    def test_master_data_only(self):
        out = StringIO()
        call_command("seed_superindo", stdout=out)

        self.assertEqual(Customer.objects.count(), 3)
        self.assertEqual(Material.objects.count(), 4)
        self.assertEqual(Product.objects.count(), 4)
        self.assertFalse(Incoming.objects.exists())
        self.assertIn("Seeding complete.", out.getvalue())

    def test_idempotent(self):
        call_command("seed_superindo", stdout=StringIO())
        call_command("seed_superindo", stdout=StringIO())
        self.assertEqual(Material.objects.count(), 4)

    def test_with_transactions_keeps_stock_non_negative(self):
        call_command("seed_superindo", "--with-transactions", "--seed", "7", stdout=StringIO())

        self.assertEqual(Incoming.objects.count(), 6)
        for item in [*Material.objects.all(), *Product.objects.all()]:
            self.assertGreaterEqual(item.stock_quantity, 0)

    def test_opening_stock_enters_through_catalog(self):
        call_command("seed_superindo", stdout=StringIO())

        flour = Material.objects.get(code="MAT001")
        self.assertEqual(flour.stock_quantity, Decimal("500.00"))
        self.assertEqual(flour.unit_price, Decimal("12000.00"))
        self.assertEqual(Product.objects.get(code="PRD003").unit, "pack")

    def test_existing_code_is_left_untouched(self):
        create_material(name="Tepung Lama", code="MAT001", unit="kg", stock_quantity=7)
        call_command("seed_superindo", stdout=StringIO())

        flour = Material.objects.get(code="MAT001")
        self.assertEqual(flour.name, "Tepung Lama")
        self.assertEqual(flour.stock_quantity, Decimal("7.00"))
