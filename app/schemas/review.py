# Pydantic schemas

from pydantic import Field, field_validator
from datetime import datetime
from uuid import UUID

from app.core.clock import ensure_utc
from app.schemas.base import CamelModel
from app.schemas.user import UserPublic

RATING_MIN, RATING_MAX = 1, 5


class ReviewCreate(CamelModel):
    """Body of ``reviews.create``"""

    event_id: UUID
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    body: str | None = Field(None, min_length=1, max_length=256)
    code: str | None = None


class ReviewRef(CamelModel):
    """Body of ``reviews.delete``"""

    id: UUID
    event_id: UUID


class ReviewResponse(CamelModel):
    id: UUID
    event_id: UUID
    user_id: str
    rating: int
    body: str | None = None
    created_at: datetime
    user: UserPublic

    @field_validator('created_at')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)
