from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.models.event import Event
from ewm.models.request import ParticipationRequest
from ewm.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, user_id: int) -> Optional[User]:
        return await self._db.get(User, user_id)

    async def get_many(self, user_ids: Iterable[int]) -> dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self._db.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def email_taken(self, email: str) -> bool:
        result = await self._db.execute(select(User.id).where(User.email == email))
        return result.scalar_one_or_none() is not None

    async def has_activity(self, user_id: int) -> bool:
        """True when the user initiated an event or submitted a participation request."""
        result = await self._db.execute(
            select(Event.id).where(Event.initiator_id == user_id).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            return True
        result = await self._db.execute(
            select(ParticipationRequest.id)
            .where(ParticipationRequest.requester_id == user_id)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def find_all(self, ids: Optional[list[int]], offset: int, limit: int) -> list[User]:
        query = select(User)
        if ids:
            query = query.where(User.id.in_(ids))
        result = await self._db.execute(query.order_by(User.id).offset(offset).limit(limit))
        return list(result.scalars().all())

    async def add(self, user: User) -> User:
        self._db.add(user)
        await self._db.flush()
        await self._db.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self._db.delete(user)
        await self._db.flush()
