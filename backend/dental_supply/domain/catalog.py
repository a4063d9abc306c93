"""
Catalog Domain Models - categories, product variants and reviews

These are simple records owned by the admin back-office or keyed to a
product; they carry no cross-entity invariants beyond the product existing.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import Field

from dental_supply.domain.common import CamelModel, Money, NonEmptyStr


# =============================================================================
# Categories
# =============================================================================

class Category(CamelModel):
    id: int
    name: str
    description: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None


class CategoryCreate(CamelModel):
    name: NonEmptyStr
    description: str = ""


class CategoryUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None


# =============================================================================
# Variants
# =============================================================================

class Variant(CamelModel):
    """
    A sellable variation of a product (size, shade, pack count)

    attributes is a free-form string map, e.g. {"size": "M", "color": "blue"}.
    """

    id: int
    product_id: int
    name: str
    sku: str
    price: Money = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    attributes: Dict[str, str] = Field(default_factory=dict)
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class VariantCreate(CamelModel):
    name: NonEmptyStr
    sku: NonEmptyStr
    price: Decimal = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    attributes: Dict[str, str] = Field(default_factory=dict)
    image_url: Optional[str] = None


class VariantUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    sku: Optional[NonEmptyStr] = None
    price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    attributes: Optional[Dict[str, str]] = None
    image_url: Optional[str] = None


# =============================================================================
# Reviews
# =============================================================================

class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Review(CamelModel):
    id: int
    product_id: int
    user_id: Optional[int] = None
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    status: ReviewStatus = ReviewStatus.PENDING
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class ReviewStatusUpdate(CamelModel):
    status: ReviewStatus


class ReviewStats(CamelModel):
    """Approved-review summary for one product"""
    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: Dict[int, int] = Field(
        default_factory=lambda: {rating: 0 for rating in range(1, 6)}
    )
