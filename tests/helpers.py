from datetime import datetime, timedelta

from app.schemas.event import EventCreate


class FakeClock:
    """Controllable clock; tests move time forward explicitly"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def as_user(user_id: str, name: str | None = None, image: str | None = None) -> dict:
    headers = {"X-User-Id": user_id}
    if name:
        headers["X-User-Name"] = name
    if image:
        headers["X-User-Image"] = image
    return headers


def event_input(clock: FakeClock, is_host: bool = False, **overrides) -> EventCreate:
    """Event starting in one hour and lasting one hour"""
    data = {
        "title": "Street Jazz",
        "description": "Live jazz trio by the fountain, bring a blanket",
        "lat": "51.505",
        "lng": "-0.09",
        "date": clock.now + timedelta(hours=1),
        "date_end": clock.now + timedelta(hours=2),
        "is_host": is_host,
    }
    data.update(overrides)
    return EventCreate(**data)


def event_payload(clock: FakeClock, is_host: bool = False, **overrides) -> dict:
    """Wire form of ``event_input`` for ``events.create``"""
    return event_input(clock, is_host=is_host, **overrides).model_dump(mode="json", by_alias=True)
