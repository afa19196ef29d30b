"""
Load-or-raise helpers shared by the services.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.exceptions import NotFoundError
from ewm.models import Category, Compilation, Event, ParticipationRequest, User
from ewm.repositories import (
    CategoryRepository,
    CompilationRepository,
    EventRepository,
    RequestRepository,
    UserRepository,
)


async def get_user_or_not_found(db: AsyncSession, user_id: int) -> User:
    user = await UserRepository(db).get(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def get_category_or_not_found(db: AsyncSession, category_id: int) -> Category:
    category = await CategoryRepository(db).get(category_id)
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


async def get_event_or_not_found(db: AsyncSession, event_id: int) -> Event:
    event = await EventRepository(db).get(event_id)
    if event is None:
        raise NotFoundError("Event", event_id)
    return event


async def get_request_or_not_found(db: AsyncSession, request_id: int) -> ParticipationRequest:
    request = await RequestRepository(db).get(request_id)
    if request is None:
        raise NotFoundError("Request", request_id)
    return request


async def get_compilation_or_not_found(db: AsyncSession, compilation_id: int) -> Compilation:
    compilation = await CompilationRepository(db).get(compilation_id)
    if compilation is None:
        raise NotFoundError("Compilation", compilation_id)
    return compilation
