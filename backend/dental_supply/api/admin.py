"""
Admin API Endpoints
Back-office operations: sales reporting, all-orders view, and management of
categories, users and products

Every route requires an admin token.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from dental_supply.core.auth import require_admin
from dental_supply.core.exceptions import NotFoundError, ValidationError
from dental_supply.domain.catalog import CategoryCreate, CategoryUpdate
from dental_supply.domain.order import OrderStatus
from dental_supply.domain.product import ProductCategory, ProductCreate, ProductUpdate
from dental_supply.domain.report import SalesReportFilters
from dental_supply.domain.user import User, UserRole, UserRoleUpdate
from dental_supply.repositories.category_repository import CategoryRepository
from dental_supply.repositories.order_repository import OrderRepository
from dental_supply.repositories.product_repository import ProductRepository
from dental_supply.repositories.user_repository import UserRepository
from dental_supply.services.sales_report_service import SalesReportService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Reporting
# =============================================================================

@router.get("/sales-report")
async def get_sales_report(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day included (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day included (YYYY-MM-DD)"),
    category: Optional[str] = Query(None, description="Exact product category"),
    top: Optional[int] = Query(None, ge=1, le=100, description="Number of top products"),
    admin: User = Depends(require_admin)
):
    """
    Sales report over order line items

    Returns:
    - totalSales, totalOrders, averageOrderValue
    - salesByCategory with percentage of total
    - salesByMonth (YYYY-MM, ascending)
    - topProducts by revenue
    """
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must not be after endDate")

    filters = SalesReportFilters(start_date=start_date, end_date=end_date, category=category)
    report = SalesReportService().get_report(filters, top_n=top)
    return report.to_dict()


@router.get("/orders")
async def get_all_orders(
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by order status"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin)
):
    """All orders across users, newest first"""
    orders, total = OrderRepository().find_all(status=order_status, limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(orders),
        "data": [order.to_dict() for order in orders]
    }


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories")
async def get_categories(admin: User = Depends(require_admin)):
    return [category.to_dict() for category in CategoryRepository().find_all()]


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, admin: User = Depends(require_admin)):
    return CategoryRepository().create(data).to_dict()


@router.patch("/categories/{category_id}")
async def update_category(category_id: int, data: CategoryUpdate, admin: User = Depends(require_admin)):
    category = CategoryRepository().update(category_id, data)
    if not category:
        raise NotFoundError("Category not found")
    return category.to_dict()


@router.delete("/categories/{category_id}")
async def delete_category(category_id: int, admin: User = Depends(require_admin)):
    if not CategoryRepository().delete(category_id):
        raise NotFoundError("Category not found")
    return {"message": "Category removed"}


# =============================================================================
# Users
# =============================================================================

@router.get("/users")
async def get_users(admin: User = Depends(require_admin)):
    return [user.to_dict() for user in UserRepository().find_all()]


@router.patch("/users/{user_id}")
async def update_user_role(user_id: int, data: UserRoleUpdate, admin: User = Depends(require_admin)):
    if user_id == admin.id and data.role != UserRole.ADMIN:
        raise ValidationError("You cannot remove your own admin role")

    user = UserRepository().update_role(user_id, data.role)
    if not user:
        raise NotFoundError("User not found")

    logger.info(f"Admin {admin.id} set role of user {user_id} to {data.role.value}")
    return user.to_dict()


@router.delete("/users/{user_id}")
async def delete_user(user_id: int, admin: User = Depends(require_admin)):
    if user_id == admin.id:
        raise ValidationError("You cannot delete your own account")

    if not UserRepository().delete(user_id):
        raise NotFoundError("User not found")

    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return {"message": "User removed"}


# =============================================================================
# Products (back-office view of the same catalog)
# =============================================================================

@router.get("/products")
async def get_admin_products(
    category: Optional[ProductCategory] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin)
):
    products, total = ProductRepository().find_all(
        category=category, search=search, limit=limit, offset=offset
    )

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_admin_product(data: ProductCreate, admin: User = Depends(require_admin)):
    return ProductRepository().create(data).to_dict()


@router.patch("/products/{product_id}")
async def update_admin_product(product_id: int, data: ProductUpdate, admin: User = Depends(require_admin)):
    product = ProductRepository().update(product_id, data)
    if not product:
        raise NotFoundError("Product not found")
    return product.to_dict()


@router.delete("/products/{product_id}")
async def delete_admin_product(product_id: int, admin: User = Depends(require_admin)):
    if not ProductRepository().delete(product_id):
        raise NotFoundError("Product not found")
    return {"message": "Product removed"}
