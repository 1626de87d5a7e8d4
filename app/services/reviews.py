from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.core.clock import Clock, ensure_utc, utcnow
from app.core.errors import (
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    Unauthorized,
    integrity_kind,
)
from app.models import Event, EventReview
from app.schemas.review import ReviewCreate
import structlog

logger = structlog.get_logger()

CODE_REQUIRED_MESSAGE = "Ask the event host for QR code to scan & get review code. (anti spam measure)"


class ReviewService:
    """Reviews of events, gated by the host-issued single-use review code"""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    async def list_event_reviews(self, event_id: UUID) -> list[EventReview]:
        stmt = (
            select(EventReview)
            .where(EventReview.event_id == event_id)
            .order_by(EventReview.created_at, EventReview.id)
            .options(selectinload(EventReview.user))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_review(self, caller_id: str | None, data: ReviewCreate) -> EventReview:
        """
        Post a review for an event that has already started.

        Hosted events additionally require the current review code. The code is
        cleared with a compare-and-swap UPDATE in the same transaction as the
        INSERT, so a duplicate review rolls back and leaves the code unspent.
        The unique (user_id, event_id) constraint decides duplicates.
        """
        if caller_id is None:
            raise Unauthorized()

        event = await self.db.get(Event, data.event_id, populate_existing=True)
        if event is None:
            raise NotFound("Event not found")
        # Rollbacks below expire the instance
        event_id, host_id, starts_at = event.id, event.user_id, ensure_utc(event.date)

        if starts_at > self.clock():
            await self.db.rollback()
            raise BadRequest("Event hasn't begun yet")

        if host_id is not None:
            consumed = None
            if data.code:
                stmt = (
                    update(Event)
                    .where(Event.id == event_id, Event.review_code == data.code)
                    .values(review_code=None)
                    .returning(Event.id)
                    .execution_options(synchronize_session=False)
                )
                consumed = (await self.db.execute(stmt)).scalar_one_or_none()
            if consumed is None:
                await self.db.rollback()
                logger.info("review_rejected_bad_code", event_id=str(event_id), user_id=caller_id)
                raise Forbidden(CODE_REQUIRED_MESSAGE)

        review = EventReview(
            event_id=event_id,
            user_id=caller_id,
            rating=data.rating,
            body=data.body,
        )
        self.db.add(review)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            kind = integrity_kind(e)
            if kind == CHECK_VIOLATION:
                raise BadRequest("Rating must be between 1 and 5")
            if kind == FOREIGN_KEY_VIOLATION:
                # Event deleted since it was read, or the reviewer is not registered
                raise NotFound("Event or reviewer not found")
            if kind != UNIQUE_VIOLATION:
                raise
            logger.info("review_rejected_duplicate", event_id=str(event_id), user_id=caller_id)
            raise Conflict("Can only post 1 review per event")

        logger.info("review_created", review_id=str(review.id), event_id=str(event_id), rating=data.rating)
        stmt = (
            select(EventReview)
            .where(EventReview.id == review.id)
            .options(selectinload(EventReview.user))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def delete_review(self, caller_id: str | None, review_id: UUID, event_id: UUID) -> UUID:
        """Authors only; matched on (id, user_id, event_id) in a single DELETE"""
        if caller_id is None:
            raise Unauthorized()

        stmt = (
            delete(EventReview)
            .where(
                EventReview.id == review_id,
                EventReview.user_id == caller_id,
                EventReview.event_id == event_id,
            )
            .returning(EventReview.id)
            .execution_options(synchronize_session=False)
        )
        deleted_id = (await self.db.execute(stmt)).scalar_one_or_none()
        if deleted_id is None:
            await self.db.rollback()
            raise NotFound("Review not found")

        await self.db.commit()
        logger.info("review_deleted", review_id=str(deleted_id), event_id=str(event_id))
        return deleted_id
