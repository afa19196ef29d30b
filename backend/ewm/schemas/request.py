"""
Pydantic schemas for participation requests and their moderation.
"""

from pydantic import Field, field_validator

from ewm.core.dates import DateTimeField
from ewm.domain.lifecycle import RequestStatus
from ewm.schemas.common import CamelModel


class ParticipationRequestResponse(CamelModel):
    id: int
    event: int = Field(validation_alias="event_id")
    requester: int = Field(validation_alias="requester_id")
    status: RequestStatus
    created: DateTimeField


class RequestStatusUpdate(CamelModel):
    request_ids: list[int] = Field(..., min_length=1)
    status: RequestStatus

    @field_validator("status")
    @classmethod
    def check_target(cls, value: RequestStatus) -> RequestStatus:
        if value not in (RequestStatus.CONFIRMED, RequestStatus.REJECTED):
            raise ValueError("status must be CONFIRMED or REJECTED")
        return value


class RequestStatusUpdateResult(CamelModel):
    confirmed_requests: list[ParticipationRequestResponse] = []
    rejected_requests: list[ParticipationRequestResponse] = []
