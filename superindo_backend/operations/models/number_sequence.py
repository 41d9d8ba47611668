# operations/models/number_sequence.py

"""
NUMBER SEQUENCE (COUNTER TABLE)

One row per (prefix, date). last_value is the last sequence handed out for
that day; operations.services.numbering increments it under select_for_update().
"""

from django.db import models


class NumberSequence(models.Model):
    prefix = models.CharField(max_length=8)
    date = models.DateField()
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["prefix", "date"],
                name="unique_number_sequence_per_prefix_date",
            ),
        ]

    def __str__(self):
        return f"{self.prefix}{self.date:%Y%m%d} -> {self.last_value:04d}"
