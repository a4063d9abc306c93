"""
Unit tests for OrderService

Uses in-memory repositories and a transaction that restores state on error,
so rollback behavior is observable without a database.
"""
from decimal import Decimal

import pytest

from conftest import shipping_address_payload
from dental_supply.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from dental_supply.domain.order import OrderCreate, OrderStatus


def order_request(*lines):
    return OrderCreate.model_validate({
        "items": [{"product": product, "quantity": quantity} for product, quantity in lines],
        "shippingAddress": shipping_address_payload()
    })


class TestPlaceOrder:

    def test_total_is_sum_of_catalog_price_times_quantity(self, order_service):
        # Gloves 2 x 10.00 + Mirror 1 x 5.00
        order = order_service.place_order(1, order_request((1, 2), (2, 1)))

        assert order.total_amount == Decimal("25.00")
        assert order.status == OrderStatus.PENDING
        assert order.user == 1

    def test_items_snapshot_name_price_and_category(self, order_service):
        order = order_service.place_order(1, order_request((2, 1)))

        item = order.items[0]
        assert item.product == 2
        assert item.name == "Dental Mirror"
        assert item.price == Decimal("5.00")
        assert item.category == "Instruments"

    def test_stock_decremented_by_ordered_quantity(self, order_service, store):
        order_service.place_order(1, order_request((1, 2), (2, 1)))

        assert store.stock == {1: 8, 2: 2}
        assert store.commits == 1

    def test_rows_locked_once_in_id_order(self, order_service, store):
        order_service.place_order(1, order_request((2, 1), (1, 1), (2, 1)))

        assert store.locked == [[1, 2]]

    def test_unknown_product_raises_not_found(self, order_service, store):
        with pytest.raises(NotFoundError) as exc_info:
            order_service.place_order(1, order_request((1, 1), (42, 1)))

        assert exc_info.value.message == "Product 42 not found"
        assert store.orders == {}
        assert store.stock == {1: 10, 2: 3}
        assert store.rollbacks == 1

    def test_insufficient_stock_rolls_back_earlier_lines(self, order_service, store):
        with pytest.raises(InsufficientStockError) as exc_info:
            order_service.place_order(1, order_request((1, 5), (2, 4)))

        assert exc_info.value.message == "Insufficient stock for product Dental Mirror"
        assert store.stock == {1: 10, 2: 3}
        assert store.orders == {}

    def test_repeated_product_checked_against_cumulative_quantity(self, order_service, store):
        with pytest.raises(InsufficientStockError):
            order_service.place_order(1, order_request((2, 2), (2, 2)))

        assert store.stock[2] == 3

    def test_exact_stock_can_be_sold_out(self, order_service, store):
        order_service.place_order(1, order_request((2, 3)))

        assert store.stock[2] == 0

        with pytest.raises(InsufficientStockError):
            order_service.place_order(1, order_request((2, 1)))
        assert store.stock[2] == 0


class TestUpdateStatus:

    @pytest.fixture
    def placed(self, order_service):
        return order_service.place_order(1, order_request((1, 1)))

    def test_forward_transition(self, order_service, placed):
        order = order_service.update_status(placed.id, OrderStatus.PROCESSING)

        assert order.status == OrderStatus.PROCESSING

    def test_same_status_is_noop(self, order_service, placed):
        order = order_service.update_status(placed.id, OrderStatus.PENDING)

        assert order.status == OrderStatus.PENDING

    def test_skipping_ahead_rejected(self, order_service, placed, store):
        with pytest.raises(ValidationError):
            order_service.update_status(placed.id, OrderStatus.DELIVERED)

        assert store.orders[placed.id].status == OrderStatus.PENDING

    def test_cancelled_is_terminal(self, order_service, placed):
        order_service.update_status(placed.id, OrderStatus.CANCELLED)

        with pytest.raises(ValidationError):
            order_service.update_status(placed.id, OrderStatus.PROCESSING)

    def test_any_change_allowed_when_not_enforced(self, order_service, placed):
        order_service.enforce_transitions = False

        order_service.update_status(placed.id, OrderStatus.DELIVERED)
        order = order_service.update_status(placed.id, OrderStatus.PENDING)

        assert order.status == OrderStatus.PENDING

    def test_missing_order(self, order_service):
        with pytest.raises(NotFoundError):
            order_service.update_status(404, OrderStatus.PROCESSING)
