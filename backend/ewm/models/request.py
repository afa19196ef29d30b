"""
Participation request of a user for an event.

One request per user per event; moderation moves PENDING requests to
CONFIRMED or REJECTED, the requester may cancel.
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, UniqueConstraint, func

from ewm.db.base import Base
from ewm.domain.lifecycle import RequestStatus


class ParticipationRequest(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(RequestStatus, name="request_status", native_enum=False, length=20),
        nullable=False,
        default=RequestStatus.PENDING,
    )
    created = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("event_id", "requester_id", name="uq_request_event_requester"),
    )

    def __repr__(self) -> str:
        return (
            f"<ParticipationRequest(id={self.id}, event={self.event_id}, "
            f"requester={self.requester_id}, status={self.status})>"
        )
