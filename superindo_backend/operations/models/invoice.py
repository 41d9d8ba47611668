# operations/models/invoice.py

"""
SALES INVOICE

GUARANTEES:
- invoice_number is unique and service-generated (INV<YYYYMMDD><NNNN>)
- total_price = quantity * unit_price (service-computed)
- creating takes `quantity` out of product stock; deleting returns it
- status is informational only: no stock side effects, any -> any
"""

from decimal import Decimal

from django.db import models

from customers.models import Customer
from inventory.models import Product


class Invoice(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_SENT = "sent"
    STATUS_PAID = "paid"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SENT, "Sent"),
        (STATUS_PAID, "Paid"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    invoice_number = models.CharField(max_length=32, unique=True)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    quantity = models.DecimalField(max_digits=12, decimal_places=2)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    invoice_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-invoice_date", "-created_at"]
        indexes = [
            models.Index(fields=["invoice_date"], name="invoice_date_idx"),
            models.Index(fields=["status"], name="invoice_status_idx"),
            models.Index(fields=["created_at"], name="invoice_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="chk_invoice_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="chk_invoice_unit_price_gte_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(due_date__isnull=True)
                | models.Q(due_date__gte=models.F("invoice_date")),
                name="chk_invoice_due_date_gte_invoice_date",
            ),
        ]

    def __str__(self):
        return f"{self.invoice_number} | {self.total_price}"
