"""Domain models for the inventory system."""

from inventory.models.user import User, UserRole
from inventory.models.product import Product
from inventory.models.sale import Sale, PaymentMode
from inventory.models.expense import Expense

__all__ = [
    "User", "UserRole",
    "Product",
    "Sale", "PaymentMode",
    "Expense",
]
