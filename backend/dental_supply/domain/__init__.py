"""
Domain Layer - Business Entities

Pydantic models for the catalog, orders, users and reports. They enforce
validation at the API boundary and type the data returned by repositories.
"""
from dental_supply.domain.product import Product, ProductCreate, ProductUpdate, PRODUCT_CATEGORIES
from dental_supply.domain.order import (
    Order,
    OrderCreate,
    OrderItem,
    OrderItemRequest,
    OrderStatus,
    ShippingAddress,
)
from dental_supply.domain.user import User, UserCreate, UserInDB, UserRole
from dental_supply.domain.catalog import Category, Review, ReviewStatus, Variant
from dental_supply.domain.report import SalesLine, SalesReport, SalesReportFilters

__all__ = [
    'Product', 'ProductCreate', 'ProductUpdate', 'PRODUCT_CATEGORIES',
    'Order', 'OrderCreate', 'OrderItem', 'OrderItemRequest', 'OrderStatus', 'ShippingAddress',
    'User', 'UserCreate', 'UserInDB', 'UserRole',
    'Category', 'Review', 'ReviewStatus', 'Variant',
    'SalesLine', 'SalesReport', 'SalesReportFilters',
]
