# reports/tests/test_dashboard.py

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from customers.models import Customer
from inventory.models import Material, Product
from operations.services import create_incoming, create_invoice, create_production
from reports.services import dashboard_stats, recent_activities, stock_report


class DashboardTests(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        self.customer = Customer.objects.create(name="PT Epindo Jaya")
        self.material = Material.objects.create(
            name="Tepung Terigu",
            code="MAT001",
            unit="kg",
            stock_quantity=Decimal("100.00"),
        )
        self.low_material = Material.objects.create(
            name="Telur Ayam",
            code="MAT004",
            unit="kg",
            stock_quantity=Decimal("9.99"),
        )
        self.product = Product.objects.create(
            name="Roti Tawar",
            code="PRD001",
            unit="pcs",
            stock_quantity=Decimal("50.00"),
        )

        create_incoming(
            customer_id=self.customer.pk,
            material_id=self.material.pk,
            quantity=10,
            unit_price="1000.50",
            incoming_date=self.today,
        )
        create_production(
            material_id=self.material.pk,
            product_id=self.product.pk,
            material_quantity_used=20,
            product_quantity_produced=5,
            production_date=self.today,
        )
        create_invoice(
            customer_id=self.customer.pk,
            product_id=self.product.pk,
            quantity=50,
            unit_price=2000,
            invoice_date=self.today,
        )

    def test_dashboard_stats(self):
        stats = dashboard_stats(today=self.today)

        self.assertEqual(stats["customers"], 1)
        self.assertEqual(stats["materials"], 2)
        self.assertEqual(stats["products"], 1)
        self.assertEqual(stats["incoming_today"], 1)
        self.assertEqual(stats["productions_today"], 1)
        self.assertEqual(stats["invoices_today"], 1)
        self.assertEqual(stats["total_incoming_value"], Decimal("10005.00"))
        self.assertEqual(stats["total_invoice_value"], Decimal("100000.00"))
        self.assertEqual(stats["low_stock_materials"], 1)
        self.assertEqual(stats["low_stock_products"], 1)  # 5 left

    def test_dashboard_stats_empty_totals(self):
        stats = dashboard_stats(today=self.today - timedelta(days=365))
        self.assertEqual(stats["incoming_today"], 0)

    @override_settings(LOW_STOCK_THRESHOLD=100)
    def test_low_stock_threshold_is_configurable(self):
        stats = dashboard_stats(today=self.today)
        self.assertEqual(stats["low_stock_materials"], 2)

    def test_stock_report(self):
        report = stock_report()

        self.assertEqual([row["code"] for row in report["materials"]], ["MAT004", "MAT001"])
        tepung = report["materials"][1]
        self.assertEqual(tepung["stock_quantity"], Decimal("90.00"))
        self.assertEqual(tepung["unit"], "kg")
        self.assertEqual(report["products"][0]["stock_quantity"], Decimal("5.00"))

    def test_recent_activities(self):
        activities = recent_activities()

        self.assertEqual(len(activities), 3)
        self.assertEqual({a["type"] for a in activities}, {"incoming", "production", "invoice"})
        dates = [a["date"] for a in activities]
        self.assertEqual(dates, sorted(dates, reverse=True))

    def test_recent_activities_limit(self):
        self.assertEqual(len(recent_activities(limit=2)), 2)
        self.assertEqual(recent_activities(limit=0), [])
