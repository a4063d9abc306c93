"""
Order Domain Models

An order is a point-in-time snapshot: line item prices and the total are
captured when the order is placed and never recomputed from the catalog.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, Field

from dental_supply.domain.common import CamelModel, Money, NonEmptyStr


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Fulfillment lifecycle; delivered and cancelled are terminal
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """True if an order in `current` may move to `new` (same status counts as allowed)"""
    if current == new:
        return True
    return new in ALLOWED_TRANSITIONS[current]


class ShippingAddress(CamelModel):
    """Structured shipping address stored with the order"""
    name: Optional[str] = Field(None, description="Recipient name")
    street: NonEmptyStr = Field(..., validation_alias=AliasChoices("street", "address"))
    city: NonEmptyStr
    state: NonEmptyStr
    zip_code: NonEmptyStr = Field(..., validation_alias=AliasChoices("zipCode", "zip", "zip_code"))
    country: NonEmptyStr


class OrderItemRequest(CamelModel):
    """One requested line: product id and quantity"""
    product: int = Field(..., description="Product ID")
    quantity: int = Field(..., ge=1)


class OrderCreate(CamelModel):
    """Checkout payload"""
    items: List[OrderItemRequest] = Field(..., min_length=1)
    shipping_address: ShippingAddress


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderItem(CamelModel):
    """
    Order line item

    Fields:
        id: Order item ID (None before insert)
        product: Product ID, None if the product was later deleted
        name: Product name at order time
        category: Product category at order time
        quantity: Units ordered
        price: Unit price at order time
    """

    id: Optional[int] = None
    product: Optional[int] = Field(None, description="Product ID")
    name: str = Field(..., description="Product name at order time")
    category: Optional[str] = Field(None, description="Product category at order time")
    quantity: int = Field(..., ge=1)
    price: Money = Field(..., description="Unit price at order time", ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Order(CamelModel):
    """
    Order domain model - matches the orders table plus its items

    total_amount is whatever was recorded at placement; it is not derived
    from items on read.
    """

    id: int = Field(..., description="Internal order ID")
    user: Optional[int] = Field(None, description="Owning user ID, None once the user is deleted")
    items: List[OrderItem] = Field(default_factory=list)
    total_amount: Money = Field(..., ge=0)
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['itemCount'] = self.item_count
        data['totalQuantity'] = self.total_quantity
        return data
