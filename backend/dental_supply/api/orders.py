"""
Orders API Endpoints
Checkout, the caller's order history, and admin status changes
"""
from fastapi import APIRouter, Depends, status

from dental_supply.core.auth import get_current_user, require_admin
from dental_supply.core.exceptions import NotFoundError
from dental_supply.domain.order import OrderCreate, OrderStatusUpdate
from dental_supply.domain.user import User
from dental_supply.repositories.order_repository import OrderRepository
from dental_supply.services.order_service import OrderService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(data: OrderCreate, user: User = Depends(get_current_user)):
    """
    Place an order for the current user

    Prices come from the catalog at the moment of purchase; the request only
    names products and quantities. Either every line is reserved and the
    order is stored, or nothing changes.
    """
    order = OrderService().place_order(user.id, data)
    return order.to_dict()


@router.get("")
async def get_my_orders(user: User = Depends(get_current_user)):
    """Orders of the current user, newest first"""
    orders = OrderRepository().find_by_user(user.id)
    return [order.to_dict() for order in orders]


@router.get("/{order_id}")
async def get_order(order_id: int, user: User = Depends(get_current_user)):
    """One of the current user's orders; other users' orders are reported as missing"""
    order = OrderRepository().find_by_id(order_id, user_id=user.id)
    if not order:
        raise NotFoundError("Order not found")
    return order.to_dict()


@router.put("/{order_id}/status")
async def update_order_status(order_id: int, data: OrderStatusUpdate, admin: User = Depends(require_admin)):
    order = OrderService().update_status(order_id, data.status)
    return order.to_dict()
