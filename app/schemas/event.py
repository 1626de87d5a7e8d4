# Pydantic schemas

from pydantic import Field, field_validator, model_validator
from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

from app.core.clock import ensure_utc
from app.schemas.base import CamelModel
from app.schemas.review import ReviewResponse
from app.schemas.user import UserPublic

TITLE_MIN, TITLE_MAX = 4, 64
DESCRIPTION_MIN, DESCRIPTION_MAX = 16, 512
COORDINATE_MAX = 32


def _validate_coordinate(value: str, bound: int, label: str) -> str:
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"{label} must be a decimal number") from None
    if not number.is_finite() or abs(number) > bound:
        raise ValueError(f"{label} must be between -{bound} and {bound}")
    return value


class EventCreate(CamelModel):
    """Schema for creating an event (``events.create``)"""

    title: str = Field(..., min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: str = Field(..., min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX)
    lat: str = Field(..., max_length=COORDINATE_MAX)
    lng: str = Field(..., max_length=COORDINATE_MAX)
    date: datetime
    date_end: datetime
    is_host: bool = False

    @field_validator('lat')
    @classmethod
    def validate_lat(cls, v: str) -> str:
        return _validate_coordinate(v, 90, "lat")

    @field_validator('lng')
    @classmethod
    def validate_lng(cls, v: str) -> str:
        return _validate_coordinate(v, 180, "lng")

    @field_validator('date', 'date_end')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode='after')
    def validate_range(self) -> "EventCreate":
        if self.date_end < self.date:
            raise ValueError("Can't end before it even starts")
        return self


class EventUpdateData(CamelModel):
    """Partial update; only the fields that are sent are applied"""

    title: str | None = Field(None, min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: str | None = Field(None, min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX)
    lat: str | None = Field(None, max_length=COORDINATE_MAX)
    lng: str | None = Field(None, max_length=COORDINATE_MAX)
    date: datetime | None = None
    date_end: datetime | None = None

    @field_validator('lat')
    @classmethod
    def validate_lat(cls, v: str | None) -> str | None:
        return v if v is None else _validate_coordinate(v, 90, "lat")

    @field_validator('lng')
    @classmethod
    def validate_lng(cls, v: str | None) -> str | None:
        return v if v is None else _validate_coordinate(v, 180, "lng")

    @field_validator('date', 'date_end')
    @classmethod
    def normalize_timestamp(cls, v: datetime | None) -> datetime | None:
        return v if v is None else ensure_utc(v)

    @model_validator(mode='after')
    def validate_fields(self) -> "EventUpdateData":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        if self.date is not None and self.date_end is not None and self.date_end < self.date:
            raise ValueError("Can't end before it even starts")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class EventUpdate(CamelModel):
    """Body of ``events.update``"""

    id: UUID
    data: EventUpdateData


class EventRef(CamelModel):
    """Body of ``events.delete``"""

    id: UUID


class ReviewCodeRequest(CamelModel):
    """Body of ``events.generate-review-code``; without an id the caller's hosted event is used"""

    id: UUID | None = None


class EventResponse(CamelModel):
    """Public view of an event; never carries the review code"""

    id: UUID
    title: str
    description: str
    lat: str
    lng: str
    date: datetime
    date_end: datetime
    user_id: str | None = None
    host: UserPublic | None = None

    @field_validator('date', 'date_end')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class HostedEventResponse(EventResponse):
    """The caller's own hosted event, including the active review code"""

    review_code: str | None = None


class EventDetailResponse(EventResponse):
    reviews: list[ReviewResponse] = Field(default_factory=list)


class ReviewCodeResponse(CamelModel):
    event_id: UUID
    code: str


class DeletedResponse(CamelModel):
    id: UUID
