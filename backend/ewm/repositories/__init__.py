"""
Repositories: one explicit loader per entity type.

Repositories wrap the request's AsyncSession, return ORM rows and never
commit; the request-scoped session owns the transaction.
"""

from ewm.repositories.category import CategoryRepository
from ewm.repositories.compilation import CompilationRepository
from ewm.repositories.event import AdminEventFilter, EventRepository, PublicEventFilter
from ewm.repositories.location import LocationRepository
from ewm.repositories.request import RequestRepository
from ewm.repositories.user import UserRepository

__all__ = [
    "AdminEventFilter",
    "CategoryRepository",
    "CompilationRepository",
    "EventRepository",
    "LocationRepository",
    "PublicEventFilter",
    "RequestRepository",
    "UserRepository",
]
