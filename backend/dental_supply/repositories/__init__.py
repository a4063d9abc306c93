"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from dental_supply.repositories.product_repository import ProductRepository
from dental_supply.repositories.order_repository import OrderRepository
from dental_supply.repositories.user_repository import UserRepository
from dental_supply.repositories.category_repository import CategoryRepository
from dental_supply.repositories.variant_repository import VariantRepository
from dental_supply.repositories.review_repository import ReviewRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'UserRepository',
    'CategoryRepository',
    'VariantRepository',
    'ReviewRepository',
]
