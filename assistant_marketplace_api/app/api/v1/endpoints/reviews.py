"""
Review endpoints for API v1.

Reviews of an assistant are public.  Posting a review requires a
completed booking between the reviewing client and the assistant.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from assistant_marketplace_api.app.core.security import Principal, get_current_user
from assistant_marketplace_api.app.schemas.review import ReviewCreate, ReviewRead
from assistant_marketplace_api.app.services.review_service import ReviewService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("/{assistant_id}", response_model=List[ReviewRead])
async def list_assistant_reviews(
    assistant_id: int = Path(..., description="ID of the reviewed assistant"),
    storage: Storage = Depends(get_storage),
) -> List[ReviewRead]:
    return await ReviewService.list_for_assistant(storage, assistant_id)


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review(
    review: ReviewCreate,
    current_user: Principal = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> ReviewRead:
    """Post a review and refresh the assistant's average rating."""
    return await ReviewService.create_review(storage, current_user, review)
