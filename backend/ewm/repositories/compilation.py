from typing import Iterable, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.models.compilation import Compilation, compilation_events


class CompilationRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, compilation_id: int) -> Optional[Compilation]:
        return await self._db.get(Compilation, compilation_id)

    async def get_by_title(self, title: str) -> Optional[Compilation]:
        result = await self._db.execute(select(Compilation).where(Compilation.title == title))
        return result.scalar_one_or_none()

    async def find_all(self, pinned: Optional[bool], offset: int, limit: int) -> list[Compilation]:
        query = select(Compilation)
        if pinned is not None:
            query = query.where(Compilation.pinned == pinned)
        result = await self._db.execute(query.order_by(Compilation.id).offset(offset).limit(limit))
        return list(result.scalars().all())

    async def event_ids(self, compilation_ids: Iterable[int]) -> dict[int, list[int]]:
        """Member event ids per compilation, ascending."""
        ids = set(compilation_ids)
        members: dict[int, list[int]] = {compilation_id: [] for compilation_id in ids}
        if not ids:
            return members
        result = await self._db.execute(
            select(compilation_events.c.compilation_id, compilation_events.c.event_id)
            .where(compilation_events.c.compilation_id.in_(ids))
            .order_by(compilation_events.c.event_id)
        )
        for compilation_id, event_id in result.all():
            members[compilation_id].append(event_id)
        return members

    async def set_events(self, compilation_id: int, event_ids: Iterable[int]) -> None:
        """Replace the membership of a compilation."""
        await self._db.execute(
            delete(compilation_events).where(compilation_events.c.compilation_id == compilation_id)
        )
        rows = [{"compilation_id": compilation_id, "event_id": event_id} for event_id in set(event_ids)]
        if rows:
            await self._db.execute(insert(compilation_events), rows)
        await self._db.flush()

    async def add(self, compilation: Compilation) -> Compilation:
        self._db.add(compilation)
        await self._db.flush()
        await self._db.refresh(compilation)
        return compilation

    async def save(self, compilation: Compilation) -> Compilation:
        await self._db.flush()
        return compilation

    async def delete(self, compilation: Compilation) -> None:
        await self._db.execute(
            delete(compilation_events).where(compilation_events.c.compilation_id == compilation.id)
        )
        await self._db.delete(compilation)
        await self._db.flush()
