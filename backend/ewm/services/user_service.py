"""
User administration service.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.exceptions import ConflictError
from ewm.core.logging import get_logger
from ewm.models import User
from ewm.repositories import UserRepository
from ewm.schemas.user import UserCreate, UserResponse
from ewm.services.lookups import get_user_or_not_found

logger = get_logger(__name__)


async def create_user(db: AsyncSession, user_data: UserCreate) -> UserResponse:
    """Register a user. Raises ConflictError if the email is already taken."""
    users = UserRepository(db)
    if await users.email_taken(user_data.email):
        raise ConflictError(f"Email {user_data.email} is already registered")

    user = await users.add(User(name=user_data.name, email=user_data.email))
    logger.info("user_created", user_id=user.id)
    return UserResponse.model_validate(user)


async def list_users(
    db: AsyncSession, ids: Optional[list[int]], offset: int, limit: int
) -> list[UserResponse]:
    users = await UserRepository(db).find_all(ids, offset, limit)
    return [UserResponse.model_validate(u) for u in users]


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Delete a user that has no events and no participation requests."""
    user = await get_user_or_not_found(db, user_id)
    users = UserRepository(db)
    if await users.has_activity(user_id):
        raise ConflictError(f"User {user_id} has events or participation requests")
    await users.delete(user)
    logger.info("user_deleted", user_id=user_id)
