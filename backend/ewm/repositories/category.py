from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.models.category import Category
from ewm.models.event import Event


class CategoryRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, category_id: int) -> Optional[Category]:
        return await self._db.get(Category, category_id)

    async def get_many(self, category_ids: Iterable[int]) -> dict[int, Category]:
        ids = set(category_ids)
        if not ids:
            return {}
        result = await self._db.execute(select(Category).where(Category.id.in_(ids)))
        return {category.id: category for category in result.scalars().all()}

    async def get_by_name(self, name: str) -> Optional[Category]:
        result = await self._db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def find_all(self, offset: int, limit: int) -> list[Category]:
        result = await self._db.execute(
            select(Category).order_by(Category.id).offset(offset).limit(limit)
        )
        return list(result.scalars().all())

    async def in_use(self, category_id: int) -> bool:
        """True when at least one event references the category."""
        result = await self._db.execute(
            select(Event.id).where(Event.category_id == category_id).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def add(self, category: Category) -> Category:
        self._db.add(category)
        await self._db.flush()
        await self._db.refresh(category)
        return category

    async def save(self, category: Category) -> Category:
        await self._db.flush()
        return category

    async def delete(self, category: Category) -> None:
        await self._db.delete(category)
        await self._db.flush()
