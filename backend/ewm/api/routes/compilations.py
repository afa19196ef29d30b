"""
Compilation endpoints: admin management and public listing.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.db.session import get_db
from ewm.schemas.compilation import CompilationCreate, CompilationResponse, CompilationUpdate
from ewm.services import compilation_service

admin_router = APIRouter(prefix="/admin/compilations", tags=["Admin: Compilations"])
public_router = APIRouter(prefix="/compilations", tags=["Public: Compilations"])


@admin_router.post("", response_model=CompilationResponse, status_code=status.HTTP_201_CREATED)
async def create_compilation_endpoint(
    data: CompilationCreate,
    db: AsyncSession = Depends(get_db),
):
    return await compilation_service.create_compilation(db, data)


@admin_router.patch("/{comp_id}", response_model=CompilationResponse)
async def update_compilation_endpoint(
    comp_id: int,
    data: CompilationUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await compilation_service.update_compilation(db, comp_id, data)


@admin_router.delete("/{comp_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_compilation_endpoint(
    comp_id: int,
    db: AsyncSession = Depends(get_db),
):
    await compilation_service.delete_compilation(db, comp_id)


@public_router.get("", response_model=list[CompilationResponse])
async def list_compilations_endpoint(
    pinned: Optional[bool] = Query(None),
    offset: int = Query(0, ge=0, alias="from"),
    limit: int = Query(10, ge=1, alias="size"),
    db: AsyncSession = Depends(get_db),
):
    return await compilation_service.list_compilations(db, pinned, offset, limit)


@public_router.get("/{comp_id}", response_model=CompilationResponse)
async def get_compilation_endpoint(
    comp_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await compilation_service.get_compilation(db, comp_id)
