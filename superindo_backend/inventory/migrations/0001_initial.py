from decimal import Decimal

from django.db import migrations, models


def _stock_item_fields():
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
            ),
        ),
        ("name", models.CharField(db_index=True, max_length=255)),
        ("code", models.CharField(max_length=50, unique=True)),
        ("description", models.TextField(blank=True, default="")),
        ("unit", models.CharField(max_length=20)),
        (
            "stock_quantity",
            models.DecimalField(
                decimal_places=2,
                default=Decimal("0.00"),
                help_text="On-hand quantity (service-managed only)",
                max_digits=12,
            ),
        ),
        (
            "unit_price",
            models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
        ),
        ("is_active", models.BooleanField(default=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Material",
            fields=_stock_item_fields(),
            options={
                "ordering": ["name"],
                "abstract": False,
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock_quantity__gte=0),
                        name="chk_material_stock_quantity_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(unit_price__gte=0),
                        name="chk_material_unit_price_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=_stock_item_fields(),
            options={
                "ordering": ["name"],
                "abstract": False,
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock_quantity__gte=0),
                        name="chk_product_stock_quantity_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(unit_price__gte=0),
                        name="chk_product_unit_price_gte_zero",
                    ),
                ],
            },
        ),
    ]
