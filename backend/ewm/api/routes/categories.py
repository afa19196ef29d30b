"""
Category endpoints: admin management and the public catalogue.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.db.session import get_db
from ewm.schemas.category import CategoryCreate, CategoryResponse
from ewm.services import category_service

admin_router = APIRouter(prefix="/admin/categories", tags=["Admin: Categories"])
public_router = APIRouter(prefix="/categories", tags=["Public: Categories"])


@admin_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category_endpoint(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    return await category_service.create_category(db, data)


@admin_router.patch("/{cat_id}", response_model=CategoryResponse)
async def update_category_endpoint(
    cat_id: int,
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    return await category_service.update_category(db, cat_id, data)


@admin_router.delete("/{cat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_endpoint(
    cat_id: int,
    db: AsyncSession = Depends(get_db),
):
    await category_service.delete_category(db, cat_id)


@public_router.get("", response_model=list[CategoryResponse])
async def list_categories_endpoint(
    offset: int = Query(0, ge=0, alias="from"),
    limit: int = Query(10, ge=1, alias="size"),
    db: AsyncSession = Depends(get_db),
):
    """Category pages are cached in Redis until the next admin write."""
    return await category_service.list_categories(db, offset, limit)


@public_router.get("/{cat_id}", response_model=CategoryResponse)
async def get_category_endpoint(
    cat_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await category_service.get_category(db, cat_id)
