# reports/services/dashboard.py

"""
DASHBOARD / REPORTING (READ SIDE)

Pure aggregation over the current state. Nothing here mutates stock.

- dashboard_stats(): headline counts + totals for the back-office home page
- stock_report(): on-hand quantities for every material and product
- recent_activities(): latest incoming / production / invoice rows, merged
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone

from customers.models import Customer
from inventory.models import Material, Product
from operations.models import Incoming, Invoice, Production

_PER_TYPE_LIMIT = 5


def _money(value) -> Decimal:
    return Decimal(value or 0).quantize(Decimal("0.01"))


def dashboard_stats(*, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    threshold = getattr(settings, "LOW_STOCK_THRESHOLD", 10)

    return {
        "customers": Customer.objects.count(),
        "materials": Material.objects.count(),
        "products": Product.objects.count(),
        "incoming_today": Incoming.objects.filter(created_at__date=today).count(),
        "productions_today": Production.objects.filter(created_at__date=today).count(),
        "invoices_today": Invoice.objects.filter(created_at__date=today).count(),
        "total_incoming_value": _money(Incoming.objects.aggregate(total=Sum("total_price"))["total"]),
        "total_invoice_value": _money(Invoice.objects.aggregate(total=Sum("total_price"))["total"]),
        "low_stock_materials": Material.objects.low_stock(threshold).count(),
        "low_stock_products": Product.objects.low_stock(threshold).count(),
    }


def stock_report() -> dict:
    fields = ("id", "name", "code", "stock_quantity", "unit")
    return {
        "materials": list(Material.objects.order_by("name").values(*fields)),
        "products": list(Product.objects.order_by("name").values(*fields)),
    }


def recent_activities(*, limit: int | None = None) -> list[dict]:
    """
    Latest 5 rows of each transaction type, merged newest-first and cut to
    `limit` (RECENT_ACTIVITY_LIMIT by default).
    """
    if limit is None:
        limit = getattr(settings, "RECENT_ACTIVITY_LIMIT", 10)

    activities = []

    for item in Incoming.objects.select_related("customer").order_by("-created_at")[:_PER_TYPE_LIMIT]:
        activities.append(
            {
                "type": "incoming",
                "description": f"Incoming {item.incoming_number} from {item.customer.name}",
                "date": item.created_at,
                "amount": item.total_price,
            }
        )

    for item in Production.objects.select_related("material", "product").order_by("-created_at")[:_PER_TYPE_LIMIT]:
        activities.append(
            {
                "type": "production",
                "description": f"Production {item.production_number}: {item.material.name} → {item.product.name}",
                "date": item.created_at,
                "amount": None,
            }
        )

    for item in Invoice.objects.select_related("customer").order_by("-created_at")[:_PER_TYPE_LIMIT]:
        activities.append(
            {
                "type": "invoice",
                "description": f"Invoice {item.invoice_number} to {item.customer.name}",
                "date": item.created_at,
                "amount": item.total_price,
            }
        )

    activities.sort(key=lambda a: a["date"], reverse=True)
    return activities[: max(int(limit), 0)]
