from .incoming import create_incoming, delete_incoming, update_incoming
from .invoice import create_invoice, delete_invoice, update_invoice, update_invoice_status
from .numbering import NumberingError, next_number
from .production import create_production, delete_production, update_production

__all__ = [
    "create_incoming",
    "update_incoming",
    "delete_incoming",
    "create_production",
    "update_production",
    "delete_production",
    "create_invoice",
    "update_invoice",
    "update_invoice_status",
    "delete_invoice",
    "next_number",
    "NumberingError",
]
