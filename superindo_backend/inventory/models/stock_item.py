# inventory/models/stock_item.py

"""
STOCK ITEM (ABSTRACT BASE)

Shared shape of Material (raw input) and Product (finished goods).

STOCK MODEL (IMPORTANT):
- stock_quantity is the current on-hand quantity (2 decimal places)
- stock_quantity is mutated ONLY via inventory.services.stock_ledger
- stock_quantity can never be negative (model + DB check constraint)
- an opening stock may be supplied on create; master-data updates never touch it
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class StockItemQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def low_stock(self, threshold=None):
        if threshold is None:
            threshold = getattr(settings, "LOW_STOCK_THRESHOLD", 10)
        return self.filter(stock_quantity__lt=threshold)


class StockItem(models.Model):
    name = models.CharField(max_length=255, db_index=True)
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True, default="")
    unit = models.CharField(max_length=20)

    stock_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="On-hand quantity (service-managed only)",
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockItemQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="chk_%(class)s_stock_quantity_gte_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="chk_%(class)s_unit_price_gte_zero",
            ),
        ]

    def clean(self):
        if self.stock_quantity is not None and Decimal(self.stock_quantity) < 0:
            raise ValidationError({"stock_quantity": "stock_quantity cannot be negative"})

        if self.unit_price is not None and Decimal(self.unit_price) < 0:
            raise ValidationError({"unit_price": "unit_price cannot be negative"})

    def has_enough_stock(self, quantity) -> bool:
        return Decimal(self.stock_quantity or 0) >= Decimal(str(quantity))

    @property
    def is_low_stock(self) -> bool:
        threshold = getattr(settings, "LOW_STOCK_THRESHOLD", 10)
        return Decimal(self.stock_quantity or 0) < Decimal(threshold)

    def __str__(self):
        return f"{self.name} ({self.code})"
