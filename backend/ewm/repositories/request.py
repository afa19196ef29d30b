from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.domain.lifecycle import RequestStatus
from ewm.models.request import ParticipationRequest


class RequestRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, request_id: int) -> Optional[ParticipationRequest]:
        return await self._db.get(ParticipationRequest, request_id)

    async def get_many(self, request_ids: Iterable[int]) -> dict[int, ParticipationRequest]:
        ids = set(request_ids)
        if not ids:
            return {}
        result = await self._db.execute(
            select(ParticipationRequest).where(ParticipationRequest.id.in_(ids))
        )
        return {request.id: request for request in result.scalars().all()}

    async def find(self, event_id: int, requester_id: int) -> Optional[ParticipationRequest]:
        result = await self._db.execute(
            select(ParticipationRequest).where(
                ParticipationRequest.event_id == event_id,
                ParticipationRequest.requester_id == requester_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_requester(self, requester_id: int) -> list[ParticipationRequest]:
        result = await self._db.execute(
            select(ParticipationRequest)
            .where(ParticipationRequest.requester_id == requester_id)
            .order_by(ParticipationRequest.id)
        )
        return list(result.scalars().all())

    async def list_by_event(self, event_id: int) -> list[ParticipationRequest]:
        result = await self._db.execute(
            select(ParticipationRequest)
            .where(ParticipationRequest.event_id == event_id)
            .order_by(ParticipationRequest.id)
        )
        return list(result.scalars().all())

    async def count_by_status(self, event_id: int, status: RequestStatus) -> int:
        """Authoritative count of an event's requests in `status`."""
        result = await self._db.execute(
            select(func.count(ParticipationRequest.id)).where(
                ParticipationRequest.event_id == event_id,
                ParticipationRequest.status == status,
            )
        )
        return result.scalar_one()

    async def add(self, request: ParticipationRequest) -> ParticipationRequest:
        self._db.add(request)
        await self._db.flush()
        await self._db.refresh(request)
        return request

    async def save_all(self, requests: list[ParticipationRequest]) -> list[ParticipationRequest]:
        await self._db.flush()
        return requests
