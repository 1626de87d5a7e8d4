from uuid import UUID

from fastapi import APIRouter, Depends, status
from app.api.deps import get_caller_id, get_review_service
from app.schemas.event import DeletedResponse
from app.schemas.review import ReviewCreate, ReviewRef, ReviewResponse
from app.services.reviews import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/event-reviews/{event_id}", response_model=list[ReviewResponse])
async def event_reviews(event_id: UUID, service: ReviewService = Depends(get_review_service)):
    return await service.list_event_reviews(event_id)


@router.post("/create", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
        data: ReviewCreate,
        caller_id: str | None = Depends(get_caller_id),
        service: ReviewService = Depends(get_review_service)
):
    """
    Review an event that has started.

    - **code**: required for hosted events; ask the host for the QR code
    - One review per user per event
    """
    return await service.create_review(caller_id, data)


@router.post("/delete", response_model=DeletedResponse)
async def delete_review(
        payload: ReviewRef,
        caller_id: str | None = Depends(get_caller_id),
        service: ReviewService = Depends(get_review_service)
):
    deleted_id = await service.delete_review(caller_id, payload.id, payload.event_id)
    return DeletedResponse(id=deleted_id)
