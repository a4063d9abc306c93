"""
Product Reviews API Endpoints
Moderation of customer reviews (admin only)
"""
import logging

from fastapi import APIRouter, Depends

from dental_supply.core.auth import require_admin
from dental_supply.core.exceptions import NotFoundError
from dental_supply.domain.catalog import ReviewStatusUpdate
from dental_supply.domain.user import User
from dental_supply.repositories.review_repository import ReviewRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/{review_id}/status")
async def update_review_status(review_id: int, data: ReviewStatusUpdate, admin: User = Depends(require_admin)):
    review = ReviewRepository().update_status(review_id, data.status)
    if not review:
        raise NotFoundError("Review not found")

    logger.info(f"Review {review_id} marked {data.status.value} by admin {admin.id}")
    return review.to_dict()


@router.delete("/{review_id}")
async def delete_review(review_id: int, admin: User = Depends(require_admin)):
    if not ReviewRepository().delete(review_id):
        raise NotFoundError("Review not found")
    return {"message": "Review removed"}
