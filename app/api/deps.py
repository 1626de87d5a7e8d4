# Request-scoped dependencies: caller identity and services

import secrets

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.clock import Clock, get_clock
from app.core.config import settings
from app.core.database import get_db
from app.services.events import EventService
from app.services.reviews import ReviewService
from app.services.users import Identity, UserService
import structlog

logger = structlog.get_logger()

USER_ID_HEADER = "X-User-Id"
USER_NAME_HEADER = "X-User-Name"
USER_IMAGE_HEADER = "X-User-Image"
IDENTITY_SECRET_HEADER = "X-Identity-Secret"


def resolve_identity(request: Request) -> Identity | None:
    """
    Read the identity forwarded by the authenticating proxy.

    Returns None (anonymous) when no user id is present, or when a shared
    secret is configured and the request does not carry it.
    """
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        return None

    if settings.identity_secret:
        supplied = request.headers.get(IDENTITY_SECRET_HEADER) or ""
        if not secrets.compare_digest(supplied, settings.identity_secret):
            logger.warning("identity_secret_mismatch", path=request.url.path)
            return None

    return Identity(
        user_id=user_id,
        name=request.headers.get(USER_NAME_HEADER) or None,
        image=request.headers.get(USER_IMAGE_HEADER) or None,
    )


async def get_caller_id(
        identity: Identity | None = Depends(resolve_identity),
        db: AsyncSession = Depends(get_db)
) -> str | None:
    """Caller's user id, or None for anonymous requests"""
    if identity is None:
        return None
    user = await UserService(db).sync_identity(identity)
    return user.id


def get_event_service(
        db: AsyncSession = Depends(get_db),
        clock: Clock = Depends(get_clock)
) -> EventService:
    return EventService(db, clock=clock)


def get_review_service(
        db: AsyncSession = Depends(get_db),
        clock: Clock = Depends(get_clock)
) -> ReviewService:
    return ReviewService(db, clock=clock)
