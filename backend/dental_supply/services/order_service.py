"""
Order Service
Places orders against the catalog and moves them through fulfillment

Handles:
- Stock reservation and price snapshot at checkout (one transaction)
- Admin status changes, checked against the fulfillment lifecycle
"""
import logging
from decimal import Decimal
from typing import Optional

from dental_supply.core.config import settings
from dental_supply.core.database import transaction
from dental_supply.core.exceptions import (
    AppError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from dental_supply.domain.order import Order, OrderCreate, OrderItem, OrderStatus, can_transition
from dental_supply.repositories.order_repository import OrderRepository
from dental_supply.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderService:
    """Business logic for order placement and status changes"""

    def __init__(
        self,
        products: Optional[ProductRepository] = None,
        orders: Optional[OrderRepository] = None,
        enforce_transitions: Optional[bool] = None
    ):
        self.products = products or ProductRepository()
        self.orders = orders or OrderRepository()
        self.enforce_transitions = (
            settings.ENFORCE_STATUS_TRANSITIONS if enforce_transitions is None else enforce_transitions
        )

    def place_order(self, user_id: int, request: OrderCreate) -> Order:
        """
        Price the request at current catalog prices, take the stock and store the order.

        Steps (single transaction):
        1. Lock every referenced product row
        2. Per line, in request order: check the product exists, decrement
           its stock only if enough is left, snapshot name/category/price
        3. Insert the order (pending) with its items

        Any failure rolls back every decrement made so far, so a rejected
        order leaves stock untouched.

        Raises:
            NotFoundError: A referenced product does not exist
            InsufficientStockError: A line asks for more than is in stock
        """
        try:
            with transaction() as conn:
                products = self.products.lock_for_update(
                    [item.product for item in request.items], conn=conn
                )

                total_amount = Decimal('0')
                lines = []

                for item in request.items:
                    product = products.get(item.product)
                    if product is None:
                        raise NotFoundError(f"Product {item.product} not found")

                    remaining = self.products.decrement_stock(product.id, item.quantity, conn=conn)
                    if remaining is None:
                        raise InsufficientStockError(f"Insufficient stock for product {product.name}")

                    total_amount += product.price * item.quantity
                    lines.append(OrderItem(
                        product=product.id,
                        name=product.name,
                        category=product.category,
                        quantity=item.quantity,
                        price=product.price
                    ))

                order = self.orders.insert(
                    user_id, lines, total_amount, request.shipping_address, conn=conn
                )

        except AppError as e:
            logger.warning(f"Order rejected for user {user_id}: {e.message}")
            raise

        logger.info(f"Order {order.id} placed by user {user_id}: {order.item_count} items, total {order.total_amount}")
        return order

    def update_status(self, order_id: int, new_status: OrderStatus) -> Order:
        """
        Move an order to `new_status`.

        With transition enforcement on, only forward moves along
        pending -> processing -> shipped -> delivered, or a cancel from a
        non-terminal state, are accepted. Re-applying the current status is a
        no-op.

        Raises:
            NotFoundError: The order does not exist
            ValidationError: The transition is not allowed
        """
        with transaction() as conn:
            current = self.orders.get_status_for_update(order_id, conn=conn)
            if current is None:
                raise NotFoundError("Order not found")

            if self.enforce_transitions and not can_transition(current, new_status):
                raise ValidationError(
                    f"Cannot change order status from {current.value} to {new_status.value}"
                )

            if current != new_status:
                self.orders.update_status(order_id, new_status, conn=conn)

        if current != new_status:
            logger.info(f"Order {order_id} status changed: {current.value} -> {new_status.value}")

        return self.orders.find_by_id(order_id)
