"""
Product Variants API Endpoints
Admin edits of individual variants (creation lives under /products/{id}/variants)
"""
from fastapi import APIRouter, Depends

from dental_supply.core.auth import require_admin
from dental_supply.core.exceptions import NotFoundError
from dental_supply.domain.catalog import VariantUpdate
from dental_supply.domain.user import User
from dental_supply.repositories.variant_repository import VariantRepository

router = APIRouter()


@router.put("/{variant_id}")
async def update_variant(variant_id: int, data: VariantUpdate, admin: User = Depends(require_admin)):
    variant = VariantRepository().update(variant_id, data)
    if not variant:
        raise NotFoundError("Variant not found")
    return variant.to_dict()


@router.delete("/{variant_id}")
async def delete_variant(variant_id: int, admin: User = Depends(require_admin)):
    if not VariantRepository().delete(variant_id):
        raise NotFoundError("Variant not found")
    return {"message": "Variant removed"}
