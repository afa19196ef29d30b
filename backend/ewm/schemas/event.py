"""
Pydantic schemas for event-related request/response validation.

Update schemas carry only optional fields: absent (or blank) fields leave the
stored value untouched.
"""

from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from ewm.core.dates import DateTimeField
from ewm.domain.lifecycle import ADMIN_ACTIONS, USER_ACTIONS, State, StateAction
from ewm.schemas.category import CategoryResponse
from ewm.schemas.common import CamelModel
from ewm.schemas.user import UserShortResponse

TEXT_MIN_LENGTH = {"title": 3, "annotation": 20, "description": 20}


class LocationSchema(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class EventCreate(CamelModel):
    title: str = Field(..., min_length=TEXT_MIN_LENGTH["title"], max_length=120)
    annotation: str = Field(..., min_length=TEXT_MIN_LENGTH["annotation"], max_length=2000)
    description: str = Field(..., min_length=TEXT_MIN_LENGTH["description"], max_length=7000)
    category: int
    event_date: DateTimeField
    location: LocationSchema
    paid: bool = False
    participant_limit: int = Field(0, ge=0)
    request_moderation: bool = True


class EventUpdate(CamelModel):
    title: Optional[str] = Field(None, max_length=120)
    annotation: Optional[str] = Field(None, max_length=2000)
    description: Optional[str] = Field(None, max_length=7000)
    category: Optional[int] = None
    event_date: Optional[DateTimeField] = None
    location: Optional[LocationSchema] = None
    paid: Optional[bool] = None
    participant_limit: Optional[int] = Field(None, ge=0)
    request_moderation: Optional[bool] = None
    state_action: Optional[StateAction] = None

    @field_validator("title", "annotation", "description")
    @classmethod
    def check_text_length(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        # blank means "leave unchanged"
        if value is None or not value.strip():
            return None
        minimum = TEXT_MIN_LENGTH[info.field_name]
        if len(value) < minimum:
            raise ValueError(f"{info.field_name} must be at least {minimum} characters")
        return value


class EventUserUpdate(EventUpdate):
    """Initiator's update: may send the event to review or withdraw it."""

    @field_validator("state_action")
    @classmethod
    def check_user_action(cls, value: Optional[StateAction]) -> Optional[StateAction]:
        if value is not None and value not in USER_ACTIONS:
            raise ValueError(f"stateAction must be one of {sorted(a.value for a in USER_ACTIONS)}")
        return value


class EventAdminUpdate(EventUpdate):
    """Administrator's update: may publish or reject a pending event."""

    @field_validator("state_action")
    @classmethod
    def check_admin_action(cls, value: Optional[StateAction]) -> Optional[StateAction]:
        if value is not None and value not in ADMIN_ACTIONS:
            raise ValueError(f"stateAction must be one of {sorted(a.value for a in ADMIN_ACTIONS)}")
        return value


class EventShortResponse(CamelModel):
    id: int
    title: str
    annotation: str
    category: CategoryResponse
    initiator: UserShortResponse
    event_date: DateTimeField
    paid: bool
    confirmed_requests: int
    views: int


class EventFullResponse(EventShortResponse):
    description: str
    location: LocationSchema
    state: State
    created_on: DateTimeField
    published_on: Optional[DateTimeField] = None
    participant_limit: int
    request_moderation: bool
