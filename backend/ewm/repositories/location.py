from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.models.location import Location


class LocationRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, location_id: int) -> Optional[Location]:
        return await self._db.get(Location, location_id)

    async def get_many(self, location_ids: Iterable[int]) -> dict[int, Location]:
        ids = set(location_ids)
        if not ids:
            return {}
        result = await self._db.execute(select(Location).where(Location.id.in_(ids)))
        return {location.id: location for location in result.scalars().all()}

    async def add(self, lat: float, lon: float) -> Location:
        location = Location(lat=lat, lon=lon)
        self._db.add(location)
        await self._db.flush()
        await self._db.refresh(location)
        return location

    async def move(self, location: Location, lat: float, lon: float) -> Location:
        location.lat = lat
        location.lon = lon
        await self._db.flush()
        return location
