from ewm.schemas.common import ApiError, CamelModel
from ewm.schemas.user import UserCreate, UserResponse, UserShortResponse
from ewm.schemas.category import CategoryCreate, CategoryResponse
from ewm.schemas.event import (
    EventAdminUpdate,
    EventCreate,
    EventFullResponse,
    EventShortResponse,
    EventUserUpdate,
    LocationSchema,
)
from ewm.schemas.request import (
    ParticipationRequestResponse,
    RequestStatusUpdate,
    RequestStatusUpdateResult,
)
from ewm.schemas.compilation import CompilationCreate, CompilationResponse, CompilationUpdate

__all__ = [
    "ApiError", "CamelModel",
    "UserCreate", "UserResponse", "UserShortResponse",
    "CategoryCreate", "CategoryResponse",
    "EventAdminUpdate", "EventCreate", "EventFullResponse", "EventShortResponse",
    "EventUserUpdate", "LocationSchema",
    "ParticipationRequestResponse", "RequestStatusUpdate", "RequestStatusUpdateResult",
    "CompilationCreate", "CompilationResponse", "CompilationUpdate",
]
