"""
Event model with moderation state and cached counters.

Key design decisions:
- References are plain foreign-key columns; related rows are loaded through
  repositories, never lazily.
- `confirmed_requests` is a cache recomputed from the requests table after
  every mutation batch; the CHECK constraint keeps it within the limit.
- `views` is a cache refreshed from the stats service whenever the event is
  shown publicly.
- Index on `event_date` for range queries, on `state` for public listings.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from ewm.db.base import Base
from ewm.domain.lifecycle import State


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(120), nullable=False)
    annotation = Column(String(2000), nullable=False)
    description = Column(String(7000), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    initiator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    state = Column(
        Enum(State, name="event_state", native_enum=False, length=20),
        nullable=False,
        default=State.PENDING,
    )
    event_date = Column(DateTime, nullable=False)
    created_on = Column(DateTime, nullable=False, server_default=func.now())
    published_on = Column(DateTime, nullable=True)
    paid = Column(Boolean, nullable=False, default=False)
    participant_limit = Column(Integer, nullable=False, default=0)
    request_moderation = Column(Boolean, nullable=False, default=True)
    confirmed_requests = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("participant_limit >= 0", name="check_participant_limit_non_negative"),
        CheckConstraint("confirmed_requests >= 0", name="check_confirmed_requests_non_negative"),
        CheckConstraint("views >= 0", name="check_views_non_negative"),
        # 0 means unlimited
        CheckConstraint(
            "participant_limit = 0 OR confirmed_requests <= participant_limit",
            name="check_confirmed_lte_limit",
        ),
        Index("ix_events_event_date", "event_date"),
        Index("ix_events_state_date", "state", "event_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Event(id={self.id}, title={self.title}, state={self.state}, "
            f"confirmed={self.confirmed_requests}/{self.participant_limit})>"
        )
