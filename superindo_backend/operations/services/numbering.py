# operations/services/numbering.py

"""
======================================================
PATH: operations/services/numbering.py
======================================================
DOCUMENT NUMBERING

Format:
    <PREFIX><YYYYMMDD><NNNN>
    IN  -> Incoming     e.g. IN202607210001
    PR  -> Production   e.g. PR202607210001
    INV -> Invoice      e.g. INV202607210001

How a number is assigned:
- A NumberSequence row per (prefix, date) is locked with select_for_update(),
  so concurrent creators on the same prefix/day are serialized.
- The next value is max(counter, last existing number in the target table) + 1.
  The table scan keeps the counter in step with caller-supplied numbers and
  with rows created before the counter existed.
- The sequence is 4 digits: number 10,000 for one prefix/day raises NumberingError.

Must run inside the transaction that inserts the numbered row, otherwise the
counter lock is released before the insert.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction
from django.utils import timezone

from operations.models import Incoming, Invoice, NumberSequence, Production

logger = logging.getLogger(__name__)

PREFIX_INCOMING = "IN"
PREFIX_PRODUCTION = "PR"
PREFIX_INVOICE = "INV"

SEQUENCE_WIDTH = 4
MAX_SEQUENCE = 10**SEQUENCE_WIDTH - 1

# prefix -> (model, number field)
_TARGETS = {
    PREFIX_INCOMING: (Incoming, "incoming_number"),
    PREFIX_PRODUCTION: (Production, "production_number"),
    PREFIX_INVOICE: (Invoice, "invoice_number"),
}


class NumberingError(Exception):
    """Raised when a prefix/day has run out of 4-digit sequence numbers."""


def format_number(prefix: str, on_date: date, sequence: int) -> str:
    return f"{prefix}{on_date:%Y%m%d}{sequence:0{SEQUENCE_WIDTH}d}"


def _last_existing_sequence(prefix: str, on_date: date) -> int:
    model, field = _TARGETS[prefix]
    stem = f"{prefix}{on_date:%Y%m%d}"

    last = (
        model.objects.filter(**{f"{field}__regex": rf"^{stem}[0-9]{{{SEQUENCE_WIDTH}}}$"})
        .order_by(f"-{field}")
        .values_list(field, flat=True)
        .first()
    )
    if not last:
        return 0
    return int(last[-SEQUENCE_WIDTH:])


@transaction.atomic
def next_number(prefix: str, *, on_date: date | None = None) -> str:
    if prefix not in _TARGETS:
        raise ValueError(f"Unknown document prefix: {prefix!r}")

    day = on_date or timezone.localdate()

    counter, _ = NumberSequence.objects.select_for_update().get_or_create(
        prefix=prefix,
        date=day,
    )

    sequence = max(int(counter.last_value), _last_existing_sequence(prefix, day)) + 1
    if sequence > MAX_SEQUENCE:
        raise NumberingError(
            f"{prefix} numbering for {day:%Y-%m-%d} is exhausted ({MAX_SEQUENCE} documents per day)"
        )

    counter.last_value = sequence
    counter.save(update_fields=["last_value"])

    number = format_number(prefix, day, sequence)
    logger.debug("Document number assigned", extra={"number": number})
    return number


def next_incoming_number(*, on_date: date | None = None) -> str:
    return next_number(PREFIX_INCOMING, on_date=on_date)


def next_production_number(*, on_date: date | None = None) -> str:
    return next_number(PREFIX_PRODUCTION, on_date=on_date)


def next_invoice_number(*, on_date: date | None = None) -> str:
    return next_number(PREFIX_INVOICE, on_date=on_date)
