"""Inventory management: products, sales, expenses and users over SQLite."""

__version__ = "0.1.0"
