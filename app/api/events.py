from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from app.api.deps import get_caller_id, get_event_service
from app.schemas.event import (
    DeletedResponse,
    EventCreate,
    EventDetailResponse,
    EventRef,
    EventResponse,
    EventUpdate,
    HostedEventResponse,
    ReviewCodeRequest,
    ReviewCodeResponse,
)
from app.services.events import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/all-events", response_model=list[EventResponse])
async def all_events(service: EventService = Depends(get_event_service)):
    """All events for the map, in the order they were added"""
    return await service.list_events()


@router.get("/event-details/{event_id}", response_model=EventDetailResponse | None)
async def event_details(event_id: UUID, service: EventService = Depends(get_event_service)):
    """One event with its host and reviews; null when it does not exist"""
    return await service.get_event_detail(event_id)


@router.get("/my-event", response_model=HostedEventResponse | None)
async def my_event(
        caller_id: str | None = Depends(get_caller_id),
        service: EventService = Depends(get_event_service)
):
    """The event hosted by the caller, or null"""
    return await service.get_hosted_event(caller_id)


@router.post("/create", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
        data: EventCreate,
        caller_id: str | None = Depends(get_caller_id),
        service: EventService = Depends(get_event_service)
):
    """
    Add an event at a map position.

    - **isHost**: host the event yourself (requires sign-in, one hosted event per user)
    - Without isHost the event is anonymous and anyone may remove it once it has ended
    """
    return await service.create_event(caller_id, data)


@router.post("/update", response_model=EventResponse)
async def update_event(
        payload: EventUpdate,
        caller_id: str | None = Depends(get_caller_id),
        service: EventService = Depends(get_event_service)
):
    """Host-only partial update"""
    return await service.update_event(caller_id, payload.id, payload.data)


@router.post("/delete", response_model=DeletedResponse)
async def delete_event(
        payload: EventRef,
        caller_id: str | None = Depends(get_caller_id),
        service: EventService = Depends(get_event_service)
):
    deleted_id = await service.delete_event(caller_id, payload.id)
    return DeletedResponse(id=deleted_id)


@router.post("/generate-review-code", response_model=ReviewCodeResponse)
async def generate_review_code(
        payload: ReviewCodeRequest | None = Body(None),
        caller_id: str | None = Depends(get_caller_id),
        service: EventService = Depends(get_event_service)
):
    """Issue a new single-use review code for the caller's hosted event"""
    event_id = payload.id if payload else None
    hosted_id, code = await service.generate_review_code(caller_id, event_id)
    return ReviewCodeResponse(event_id=hosted_id, code=code)
