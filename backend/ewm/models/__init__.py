from ewm.models.category import Category
from ewm.models.compilation import Compilation, compilation_events
from ewm.models.event import Event
from ewm.models.location import Location
from ewm.models.request import ParticipationRequest
from ewm.models.user import User

__all__ = [
    "Category",
    "Compilation",
    "compilation_events",
    "Event",
    "Location",
    "ParticipationRequest",
    "User",
]
