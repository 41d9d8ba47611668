from .customer_service import create_customer, delete_customer, update_customer

__all__ = [
    "create_customer",
    "update_customer",
    "delete_customer",
]
