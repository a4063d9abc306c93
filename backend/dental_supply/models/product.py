"""
Catalog tables: products, categories, variants, reviews
"""
from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from dental_supply.core.database import Base
from dental_supply.domain.product import PRODUCT_CATEGORIES


class Product(Base):
    """
    Catalog products - one table serves storefront and admin screens
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("in_stock >= 0", name="products_in_stock_non_negative"),
        CheckConstraint("price >= 0", name="products_price_non_negative"),
        CheckConstraint(
            "category IN (" + ", ".join(f"'{c}'" for c in PRODUCT_CATEGORIES) + ")",
            name="products_category_known"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, server_default="")
    price = Column(DECIMAL(12, 2), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    image_url = Column(Text, nullable=False, server_default="")
    in_stock = Column(Integer, nullable=False, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=False, server_default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ProductVariant(Base):
    __tablename__ = "product_variants"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="product_variants_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=False, unique=True)
    price = Column(DECIMAL(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, server_default="0")
    attributes = Column(JSONB, nullable=False, server_default="{}")
    image_url = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ProductReview(Base):
    __tablename__ = "product_reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="product_reviews_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    user_name = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, server_default="")
    status = Column(String(20), nullable=False, server_default="pending", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
