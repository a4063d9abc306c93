"""
Products API Endpoints
Public catalog reads, admin product management, and the per-product
variant and review sub-resources
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from dental_supply.core.auth import get_current_user, get_optional_user, require_admin
from dental_supply.core.config import settings
from dental_supply.core.exceptions import NotFoundError
from dental_supply.domain.catalog import ReviewCreate, VariantCreate
from dental_supply.domain.product import ProductCategory, ProductCreate, ProductUpdate
from dental_supply.domain.user import User
from dental_supply.repositories.product_repository import ProductRepository
from dental_supply.repositories.review_repository import ReviewRepository
from dental_supply.repositories.variant_repository import VariantRepository

router = APIRouter()


def _get_product_or_404(repo: ProductRepository, product_id: int):
    product = repo.find_by_id(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


@router.get("")
async def get_products(
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    in_stock: bool = Query(False, alias="inStock", description="Only products with stock"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """
    Get all products with optional filters
    """
    repo = ProductRepository()

    products, total = repo.find_all(
        category=category,
        search=search,
        in_stock_only=in_stock,
        limit=limit,
        offset=offset
    )

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/stats")
async def get_product_stats(admin: User = Depends(require_admin)):
    """
    Get product statistics

    Returns:
    - Total products and inventory value
    - Low stock / out of stock counts
    - Per-category counts, value and average price
    - Sales totals and best sellers
    """
    repo = ProductRepository()
    stats = repo.get_stats(low_stock_threshold=settings.LOW_STOCK_THRESHOLD, top_n=settings.SALES_REPORT_TOP_N)

    return {
        "status": "success",
        "data": stats
    }


@router.get("/{product_id}")
async def get_product(product_id: int):
    repo = ProductRepository()
    return _get_product_or_404(repo, product_id).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, admin: User = Depends(require_admin)):
    repo = ProductRepository()
    return repo.create(data).to_dict()


@router.put("/{product_id}")
async def update_product(product_id: int, data: ProductUpdate, admin: User = Depends(require_admin)):
    """Partial update; only fields present in the body change"""
    repo = ProductRepository()
    product = repo.update(product_id, data)
    if not product:
        raise NotFoundError("Product not found")
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(product_id: int, admin: User = Depends(require_admin)):
    """Delete a product. Orders keep their item snapshot with the product reference cleared."""
    repo = ProductRepository()
    if not repo.delete(product_id):
        raise NotFoundError("Product not found")
    return {"message": "Product removed"}


# =============================================================================
# Variants
# =============================================================================

@router.get("/{product_id}/variants")
async def get_product_variants(product_id: int):
    variants = VariantRepository().find_by_product(product_id)
    return [variant.to_dict() for variant in variants]


@router.post("/{product_id}/variants", status_code=status.HTTP_201_CREATED)
async def create_product_variant(product_id: int, data: VariantCreate, admin: User = Depends(require_admin)):
    _get_product_or_404(ProductRepository(), product_id)
    return VariantRepository().create(product_id, data).to_dict()


# =============================================================================
# Reviews
# =============================================================================

@router.get("/{product_id}/reviews")
async def get_product_reviews(product_id: int, user: Optional[User] = Depends(get_optional_user)):
    """Approved reviews; admins also see pending and rejected ones"""
    approved_only = not (user and user.is_admin)
    reviews = ReviewRepository().find_by_product(product_id, approved_only=approved_only)
    return [review.to_dict() for review in reviews]


@router.post("/{product_id}/reviews", status_code=status.HTTP_201_CREATED)
async def create_product_review(product_id: int, data: ReviewCreate, user: User = Depends(get_current_user)):
    """New reviews wait for moderation (status pending)"""
    _get_product_or_404(ProductRepository(), product_id)
    review = ReviewRepository().create(product_id, user.id, user.name, data)
    return review.to_dict()


@router.get("/{product_id}/review-stats")
async def get_product_review_stats(product_id: int):
    return ReviewRepository().get_stats(product_id).to_dict()
