"""
Database table definitions (SQLAlchemy)

Repositories query these tables with raw SQL; the models exist so the schema
lives in one place and scripts/init_db.py can create it.
"""
from .user import User
from .product import Product, Category, ProductVariant, ProductReview
from .order import Order, OrderItem

__all__ = [
    "User",
    "Product",
    "Category",
    "ProductVariant",
    "ProductReview",
    "Order",
    "OrderItem",
]
