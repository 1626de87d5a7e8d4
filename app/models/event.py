# SQLAlchemy models

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.clock import insertion_stamp
from app.models.base import Base
import uuid


class Event(Base):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(64), nullable=False)
    description = Column(String(512), nullable=False)
    lat = Column(String(32), nullable=False)
    lng = Column(String(32), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    date_end = Column(DateTime(timezone=True), nullable=False, index=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    review_code = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=insertion_stamp, index=True)

    host = relationship("User", lazy="raise")
    reviews = relationship(
        "EventReview",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EventReview.created_at",
        lazy="raise",
    )

    __table_args__ = (
        # One hosted event per user; NULL hosts (anonymous events) never collide
        UniqueConstraint("user_id", name="uq_events_user_id"),
        CheckConstraint("date_end >= date", name="ck_events_date_order"),
    )
