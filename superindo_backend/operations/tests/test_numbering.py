# operations/tests/test_numbering.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from customers.models import Customer
from inventory.models import Material
from operations.models import Incoming, NumberSequence
from operations.services import NumberingError, create_incoming, next_number
from operations.services.numbering import PREFIX_INCOMING, PREFIX_INVOICE, PREFIX_PRODUCTION, format_number

DAY = date(2025, 7, 21)


class NumberingTests(TestCase):
    """
    Document numbers: <PREFIX><YYYYMMDD><NNNN>, restarting per prefix and day.
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="PT Epindo Jaya")
        self.material = Material.objects.create(
            name="Tepung Terigu",
            code="MAT001",
            unit="kg",
            stock_quantity=Decimal("0.00"),
        )

    def _incoming(self, **overrides):
        data = {
            "customer_id": self.customer.pk,
            "material_id": self.material.pk,
            "quantity": 10,
            "unit_price": 1000,
            "incoming_date": DAY,
            "on_date": DAY,
        }
        data.update(overrides)
        return create_incoming(**data)

    def test_format(self):
        self.assertEqual(format_number("INV", DAY, 7), "INV202507210007")

    def test_first_number_of_the_day(self):
        self.assertEqual(next_number(PREFIX_INCOMING, on_date=DAY), "IN202507210001")

    def test_sequential_on_same_day(self):
        first = self._incoming()
        second = self._incoming()

        self.assertEqual(first.incoming_number, "IN202507210001")
        self.assertEqual(second.incoming_number, "IN202507210002")

    def test_prefixes_are_independent(self):
        self.assertEqual(next_number(PREFIX_INCOMING, on_date=DAY), "IN202507210001")
        self.assertEqual(next_number(PREFIX_PRODUCTION, on_date=DAY), "PR202507210001")
        self.assertEqual(next_number(PREFIX_INVOICE, on_date=DAY), "INV202507210001")
        self.assertEqual(next_number(PREFIX_INCOMING, on_date=DAY), "IN202507210002")

    def test_restarts_on_new_day(self):
        next_number(PREFIX_INCOMING, on_date=DAY)
        self.assertEqual(
            next_number(PREFIX_INCOMING, on_date=date(2025, 7, 22)),
            "IN202507220001",
        )

    def test_continues_after_existing_rows(self):
        Incoming.objects.create(
            incoming_number="IN202507210041",
            customer=self.customer,
            material=self.material,
            quantity=Decimal("1.00"),
            unit_price=Decimal("1.00"),
            total_price=Decimal("1.00"),
            incoming_date=DAY,
        )
        self.assertEqual(self._incoming().incoming_number, "IN202507210042")

    def test_caller_supplied_number_is_kept(self):
        incoming = self._incoming(incoming_number="IN202507210005")
        self.assertEqual(incoming.incoming_number, "IN202507210005")
        self.assertEqual(self._incoming().incoming_number, "IN202507210006")

    def test_exhausted_day_raises(self):
        NumberSequence.objects.create(prefix=PREFIX_INCOMING, date=DAY, last_value=9999)

        with self.assertRaises(NumberingError):
            self._incoming()

        self.material.refresh_from_db()
        self.assertEqual(self.material.stock_quantity, Decimal("0.00"))
        self.assertFalse(Incoming.objects.exists())

    def test_unknown_prefix(self):
        with self.assertRaises(ValueError):
            next_number("XX", on_date=DAY)
