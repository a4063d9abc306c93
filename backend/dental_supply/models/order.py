"""
Orders and their line items
"""
from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime, DECIMAL, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from dental_supply.core.database import Base


class Order(Base):
    """
    Orders - total_amount is the snapshot taken at checkout
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)

    total_amount = Column(DECIMAL(12, 2), nullable=False)
    shipping_address = Column(JSONB, nullable=False)
    status = Column(String(20), nullable=False, server_default="pending", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class OrderItem(Base):
    """
    Line items; product name and unit price are copied at order time
    """
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), index=True)

    product_name = Column(String(255), nullable=False)
    category = Column(String(50))
    quantity = Column(Integer, nullable=False)
    unit_price = Column(DECIMAL(12, 2), nullable=False)
