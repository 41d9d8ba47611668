# operations/models/production.py

"""
PRODUCTION RUN

Converts material into product.

GUARANTEES:
- production_number is unique and service-generated (PR<YYYYMMDD><NNNN>)
- creating takes material_quantity_used out of material stock and adds
  product_quantity_produced to product stock; deleting reverses both
"""

from django.db import models

from inventory.models import Material, Product


class Production(models.Model):
    production_number = models.CharField(max_length=32, unique=True)

    material = models.ForeignKey(
        Material,
        on_delete=models.PROTECT,
        related_name="productions",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="productions",
    )

    material_quantity_used = models.DecimalField(max_digits=12, decimal_places=2)
    product_quantity_produced = models.DecimalField(max_digits=12, decimal_places=2)

    production_date = models.DateField()
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-production_date", "-created_at"]
        indexes = [
            models.Index(fields=["production_date"], name="production_date_idx"),
            models.Index(fields=["created_at"], name="production_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(material_quantity_used__gt=0),
                name="chk_production_material_used_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(product_quantity_produced__gt=0),
                name="chk_production_product_produced_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.production_number} | {self.material_quantity_used} -> {self.product_quantity_produced}"
