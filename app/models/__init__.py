from app.models.base import Base
from app.models.user import User
from app.models.event import Event
from app.models.review import EventReview

__all__ = ["Base", "User", "Event", "EventReview"]
