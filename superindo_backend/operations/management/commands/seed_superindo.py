import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from customers.models import Customer
from inventory.models import Material, Product
from inventory.services import create_material, create_product
from inventory.services.exceptions import InsufficientStockError
from operations.services import create_incoming, create_invoice, create_production

CUSTOMERS = [
    ("PT Epindo Jaya", "contact@epindo.com", "021-1234567", "Jl. Industri No. 123, Jakarta", "Budi Santoso"),
    ("CV Maju Bersama", "info@majubersama.co.id", "021-7654321", "Jl. Perdagangan No. 456, Bekasi", "Siti Rahayu"),
    ("PT Sukses Mandiri", "admin@suksesmandiri.com", "021-9876543", "Jl. Bisnis No. 789, Tangerang", "Ahmad Wijaya"),
]

# code, name, description, unit, opening stock, unit price
MATERIALS = [
    ("MAT001", "Tepung Terigu", "Tepung terigu protein tinggi untuk produksi roti", "kg", "500.00", "12000.00"),
    ("MAT002", "Gula Pasir", "Gula pasir putih berkualitas tinggi", "kg", "300.00", "15000.00"),
    ("MAT003", "Minyak Kelapa Sawit", "Minyak kelapa sawit untuk produksi makanan", "liter", "200.00", "18000.00"),
    ("MAT004", "Telur Ayam", "Telur ayam segar grade A", "kg", "100.00", "25000.00"),
]

PRODUCTS = [
    ("PRD001", "Roti Tawar", "Roti tawar putih kemasan 400g", "pcs", "50.00", "8000.00"),
    ("PRD002", "Kue Donat", "Donat manis dengan berbagai topping", "pcs", "75.00", "5000.00"),
    ("PRD003", "Biskuit Coklat", "Biskuit rasa coklat kemasan 200g", "pack", "120.00", "12000.00"),
    ("PRD004", "Kue Kering", "Kue kering aneka rasa kemasan 300g", "pack", "80.00", "15000.00"),
]


class Command(BaseCommand):
    help = "Seed customers, materials, products and (optionally) sample transactions"

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-transactions",
            action="store_true",
            help="Also create sample incoming / production / invoice records through the stock services.",
        )
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data.")

    def handle(self, *args, **options):
        rng = random.Random(options["seed"])

        self.stdout.write(self.style.WARNING("Seeding master data..."))

        customers = []
        for name, email, phone, address, contact in CUSTOMERS:
            customer, _ = Customer.objects.get_or_create(
                name=name,
                defaults={"email": email, "phone": phone, "address": address, "contact_person": contact},
            )
            customers.append(customer)

        materials = [self._stock_item(Material, create_material, row) for row in MATERIALS]
        products = [self._stock_item(Product, create_product, row) for row in PRODUCTS]

        self.stdout.write(
            self.style.SUCCESS(
                f"✔ {len(customers)} customers, {len(materials)} materials, {len(products)} products"
            )
        )

        if options["with_transactions"]:
            self._seed_transactions(rng, customers, materials, products)

        self.stdout.write(self.style.SUCCESS("Seeding complete."))

    def _stock_item(self, model, create, row):
        code, name, description, unit, stock, price = row
        existing = model.objects.filter(code=code).first()
        if existing is not None:
            return existing
        # opening stock goes through the catalog service like any other item
        return create(
            name=name,
            code=code,
            description=description,
            unit=unit,
            stock_quantity=stock,
            unit_price=price,
        )

    def _seed_transactions(self, rng, customers, materials, products):
        today = timezone.localdate()

        self.stdout.write("Creating incoming transactions...")
        for customer in customers:
            for material in materials[:2]:
                create_incoming(
                    customer_id=customer.pk,
                    material_id=material.pk,
                    quantity=rng.randint(50, 200),
                    unit_price=material.unit_price,
                    incoming_date=today - timedelta(days=rng.randint(1, 30)),
                    notes="Sample incoming transaction",
                )

        self.stdout.write("Creating production transactions...")
        for material in materials[:3]:
            for product in products[:2]:
                try:
                    create_production(
                        material_id=material.pk,
                        product_id=product.pk,
                        material_quantity_used=rng.randint(10, 50),
                        product_quantity_produced=rng.randint(20, 80),
                        production_date=today - timedelta(days=rng.randint(1, 15)),
                        notes="Sample production transaction",
                    )
                except InsufficientStockError as exc:
                    self.stdout.write(
                        self.style.WARNING(f"Skipped production {material.name} -> {product.name}: {exc}")
                    )

        self.stdout.write("Creating invoice transactions...")
        for customer in customers:
            for product in products[:2]:
                try:
                    create_invoice(
                        customer_id=customer.pk,
                        product_id=product.pk,
                        quantity=rng.randint(5, 25),
                        unit_price=product.unit_price,
                        invoice_date=today - timedelta(days=rng.randint(1, 10)),
                        due_date=today + timedelta(days=rng.randint(7, 30)),
                        status=rng.choice(["draft", "sent", "paid"]),
                        notes="Sample invoice transaction",
                    )
                except InsufficientStockError as exc:
                    self.stdout.write(
                        self.style.WARNING(f"Skipped invoice {customer.name} -> {product.name}: {exc}")
                    )

        self.stdout.write("Final stock levels:")
        for item in [*materials, *products]:
            item.refresh_from_db()
            self.stdout.write(f"- {item.name}: {item.stock_quantity} {item.unit}")
