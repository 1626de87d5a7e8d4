from datetime import datetime
from uuid import UUID
import secrets
import string

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.core.clock import Clock, ensure_utc, utcnow
from app.core.config import settings
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
from app.schemas.event import EventCreate, EventUpdateData
import structlog

logger = structlog.get_logger()

REVIEW_CODE_ALPHABET = string.ascii_letters + string.digits


def generate_code(length: int) -> str:
    return "".join(secrets.choice(REVIEW_CODE_ALPHABET) for _ in range(length))


def finished_anonymous(now: datetime):
    """Predicate for unhosted events whose end time has passed"""
    return and_(Event.user_id.is_(None), Event.date_end < now)


class EventService:
    """Event lifecycle: creation, host-only mutation, review codes and deletion"""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow,
                 code_length: int | None = None):
        self.db = db
        self.clock = clock
        self.code_length = code_length or settings.review_code_length

    def _with_host(self, stmt):
        return stmt.options(selectinload(Event.host)).execution_options(populate_existing=True)

    async def _load(self, event_id: UUID) -> Event | None:
        stmt = self._with_host(select(Event).where(Event.id == event_id))
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def list_events(self) -> list[Event]:
        """All events in insertion order, hosts attached"""
        stmt = self._with_host(select(Event).order_by(Event.created_at, Event.id))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_event_detail(self, event_id: UUID) -> Event | None:
        stmt = (
            select(Event)
            .where(Event.id == event_id)
            .options(
                selectinload(Event.host),
                selectinload(Event.reviews).selectinload(EventReview.user),
            )
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_hosted_event(self, caller_id: str | None) -> Event | None:
        if caller_id is None:
            raise Unauthorized()
        stmt = self._with_host(select(Event).where(Event.user_id == caller_id))
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def create_event(self, caller_id: str | None, data: EventCreate) -> Event:
        """
        Create an event, optionally hosted by the caller.

        The one-hosted-event-per-user rule is left to the unique index on
        events.user_id so concurrent attempts are decided by the store.
        """
        if data.is_host and caller_id is None:
            raise Unauthorized("Sign in to host an event")
        if data.date_end < data.date:
            raise BadRequest("Can't end before it even starts")

        event = Event(
            title=data.title,
            description=data.description,
            lat=data.lat,
            lng=data.lng,
            date=data.date,
            date_end=data.date_end,
            user_id=caller_id if data.is_host else None,
        )
        self.db.add(event)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            kind = integrity_kind(e)
            if kind == CHECK_VIOLATION:
                raise BadRequest("Can't end before it even starts")
            if kind == FOREIGN_KEY_VIOLATION:
                # Host is not a registered user
                raise NotFound("Unknown user")
            if kind != UNIQUE_VIOLATION:
                raise
            logger.info("event_rejected_already_hosting", user_id=caller_id)
            raise Conflict("You are already hosting an event")

        logger.info("event_created", event_id=str(event.id), hosted=data.is_host)
        return await self._load(event.id)

    async def update_event(self, caller_id: str | None, event_id: UUID,
                           data: EventUpdateData) -> Event:
        """
        Apply a partial update. Only the host may update; the row is matched on
        (id, host) together so a foreign event looks exactly like a missing one.
        """
        if caller_id is None:
            raise Unauthorized()

        stmt = (
            select(Event)
            .where(Event.id == event_id, Event.user_id == caller_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        event = (await self.db.execute(stmt)).scalar_one_or_none()
        if event is None:
            await self.db.rollback()
            raise NotFound("Event not found")

        changes = data.changes()
        for field, value in changes.items():
            setattr(event, field, value)

        if ensure_utc(event.date_end) < ensure_utc(event.date):
            await self.db.rollback()
            raise BadRequest("Can't end before it even starts")

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if integrity_kind(e) == CHECK_VIOLATION:
                raise BadRequest("Can't end before it even starts")
            raise

        logger.info("event_updated", event_id=str(event_id), fields=sorted(changes))
        return await self._load(event_id)

    async def generate_review_code(self, caller_id: str | None,
                                   event_id: UUID | None = None) -> tuple[UUID, str]:
        """Issue a fresh review code for the caller's hosted event, replacing any previous one"""
        if caller_id is None:
            raise Unauthorized()

        code = generate_code(self.code_length)
        conditions = [Event.user_id == caller_id]
        if event_id is not None:
            conditions.append(Event.id == event_id)

        stmt = (
            update(Event)
            .where(*conditions)
            .values(review_code=code)
            .returning(Event.id)
            .execution_options(synchronize_session=False)
        )
        updated_id = (await self.db.execute(stmt)).scalar_one_or_none()
        if updated_id is None:
            await self.db.rollback()
            raise NotFound("You are not hosting an event")

        await self.db.commit()
        logger.info("review_code_generated", event_id=str(updated_id))
        return updated_id, code

    async def delete_event(self, caller_id: str | None, event_id: UUID) -> UUID:
        """
        Delete an event.

        Allowed for the host at any time, and for anyone once an unhosted event
        has ended. Both paths are a single conditional DELETE; reviews go with
        the event through the foreign key cascade.
        """
        allowed = finished_anonymous(self.clock())
        if caller_id is not None:
            allowed = or_(Event.user_id == caller_id, allowed)

        stmt = (
            delete(Event)
            .where(Event.id == event_id, allowed)
            .returning(Event.id)
            .execution_options(synchronize_session=False)
        )
        deleted_id = (await self.db.execute(stmt)).scalar_one_or_none()
        if deleted_id is None:
            await self.db.rollback()
            exists = await self.db.scalar(select(Event.id).where(Event.id == event_id))
            if exists is None:
                raise NotFound("Event not found")
            if caller_id is None:
                raise Unauthorized("Only the host can delete this event")
            raise Forbidden("Only the host can delete this event")

        await self.db.commit()
        logger.info("event_deleted", event_id=str(deleted_id), user_id=caller_id)
        return deleted_id

    async def purge_finished_anonymous(self) -> int:
        """Delete every unhosted event that has already ended"""
        stmt = (
            delete(Event)
            .where(finished_anonymous(self.clock()))
            .returning(Event.id)
            .execution_options(synchronize_session=False)
        )
        removed = len((await self.db.execute(stmt)).scalars().all())
        await self.db.commit()
        logger.info("finished_anonymous_events_purged", removed=removed)
        return removed
