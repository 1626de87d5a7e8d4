# SQLAlchemy models

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, CheckConstraint, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import insertion_stamp
from app.models.base import Base
import uuid


class EventReview(Base):
    __tablename__ = "event_reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    body = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=insertion_stamp)

    event = relationship("Event", back_populates="reviews", lazy="raise")
    user = relationship("User", lazy="raise")

    __table_args__ = (
        # Composite key used for ownership checks; also enforces one review per user per event
        UniqueConstraint("user_id", "event_id", name="uq_event_reviews_user_event"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_event_reviews_rating"),
    )
