# operations/models/incoming.py

"""
INCOMING (MATERIAL RECEIPT)

One delivery of a material from a customer.

GUARANTEES:
- incoming_number is unique and service-generated (IN<YYYYMMDD><NNNN>)
- total_price = quantity * unit_price (service-computed)
- creating adds `quantity` to material stock; deleting takes it back out
- rows are written ONLY via operations.services.incoming
"""

from decimal import Decimal

from django.db import models

from customers.models import Customer
from inventory.models import Material


class Incoming(models.Model):
    incoming_number = models.CharField(max_length=32, unique=True)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="incomings",
    )
    material = models.ForeignKey(
        Material,
        on_delete=models.PROTECT,
        related_name="incomings",
    )

    quantity = models.DecimalField(max_digits=12, decimal_places=2)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    incoming_date = models.DateField()
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-incoming_date", "-created_at"]
        indexes = [
            models.Index(fields=["incoming_date"], name="incoming_date_idx"),
            models.Index(fields=["created_at"], name="incoming_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="chk_incoming_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="chk_incoming_unit_price_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.incoming_number} | {self.quantity}"
