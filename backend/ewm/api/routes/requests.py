"""
Participation request endpoints for the requester and for the event initiator.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.db.session import get_db
from ewm.schemas.request import (
    ParticipationRequestResponse,
    RequestStatusUpdate,
    RequestStatusUpdateResult,
)
from ewm.services import request_service

router = APIRouter(prefix="/users/{user_id}", tags=["Private: Requests"])


@router.post(
    "/requests",
    response_model=ParticipationRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_request_endpoint(
    user_id: int,
    event_id: int = Query(..., alias="eventId"),
    db: AsyncSession = Depends(get_db),
):
    return await request_service.create_request(db, user_id, event_id)


@router.get("/requests", response_model=list[ParticipationRequestResponse])
async def list_user_requests_endpoint(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await request_service.list_user_requests(db, user_id)


@router.patch("/requests/{request_id}/cancel", response_model=ParticipationRequestResponse)
async def cancel_request_endpoint(
    user_id: int,
    request_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await request_service.cancel_request(db, user_id, request_id)


@router.get("/events/{event_id}/requests", response_model=list[ParticipationRequestResponse])
async def list_event_requests_endpoint(
    user_id: int,
    event_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await request_service.list_event_requests(db, user_id, event_id)


@router.patch("/events/{event_id}/requests", response_model=RequestStatusUpdateResult)
async def moderate_requests_endpoint(
    user_id: int,
    event_id: int,
    update: RequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Confirm or reject pending requests in one batch.
    Requests beyond the free slots are rejected even when confirmation was asked for.
    """
    return await request_service.moderate_requests(db, user_id, event_id, update)
