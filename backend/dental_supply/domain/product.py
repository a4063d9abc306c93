"""
Product Domain Model

Represents a product in the dental supply catalog. The storefront and the
admin product-management screens both read and write this one entity.
"""
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator

from dental_supply.domain.common import CamelModel, Money, NonEmptyStr

PRODUCT_CATEGORIES = ("Equipment", "Consumables", "Instruments", "Hygiene", "Orthodontics")

ProductCategory = Literal["Equipment", "Consumables", "Instruments", "Hygiene", "Orthodontics"]

# Admin screens send "stock", the storefront sends "inStock"
STOCK_ALIASES = AliasChoices("inStock", "stock", "in_stock")


def _check_image_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid image URL")
    return value


class Product(CamelModel):
    """
    Product domain model - matches the products table

    Fields:
        id: Internal product ID (primary key)
        name: Product name
        description: Product description
        price: Current catalog price, never negative
        category: One of PRODUCT_CATEGORIES
        image_url: Absolute URL of the product image
        in_stock: Sellable units on hand, never negative
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: int = Field(..., description="Internal product ID")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: Money = Field(..., description="Current price", ge=0)
    category: ProductCategory = Field(..., description="Product category")
    image_url: str = Field("", description="Image URL")
    in_stock: int = Field(0, description="Units in stock", ge=0)
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @property
    def is_out_of_stock(self) -> bool:
        return self.in_stock <= 0

    @property
    def inventory_value(self) -> Decimal:
        """Price times units on hand"""
        return self.price * self.in_stock

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['isOutOfStock'] = self.is_out_of_stock
        return data


class ProductCreate(CamelModel):
    """Schema for creating a new product"""
    name: NonEmptyStr
    description: NonEmptyStr
    price: Decimal = Field(..., ge=0)
    category: ProductCategory
    image_url: str
    in_stock: int = Field(0, ge=0, validation_alias=STOCK_ALIASES)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, value):
        return _check_image_url(value)


class ProductUpdate(CamelModel):
    """Schema for a partial product update"""
    name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[ProductCategory] = None
    image_url: Optional[str] = None
    in_stock: Optional[int] = Field(None, ge=0, validation_alias=STOCK_ALIASES)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, value):
        return _check_image_url(value)
