# customers/models.py

from django.db import models


class Customer(models.Model):
    """
    Trading partner.

    Sends materials (Incoming) and buys products (Invoice).
    No stock semantics of its own; cannot be deleted while referenced.
    """

    name = models.CharField(max_length=255, db_index=True)
    email = models.EmailField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    address = models.TextField(blank=True, default="")
    contact_person = models.CharField(max_length=255, blank=True, default="")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
