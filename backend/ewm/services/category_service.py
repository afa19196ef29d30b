"""
Category service. Public pages are cached in Redis; every admin write
drops the cached pages.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.exceptions import ConflictError
from ewm.core.logging import get_logger
from ewm.models import Category
from ewm.repositories import CategoryRepository
from ewm.schemas.category import CategoryCreate, CategoryResponse
from ewm.services import cache_service
from ewm.services.lookups import get_category_or_not_found

logger = get_logger(__name__)


async def _ensure_name_free(categories: CategoryRepository, name: str, category_id=None) -> None:
    existing = await categories.get_by_name(name)
    if existing is not None and existing.id != category_id:
        raise ConflictError(f"Category name '{name}' is already in use")


async def create_category(db: AsyncSession, data: CategoryCreate) -> CategoryResponse:
    categories = CategoryRepository(db)
    await _ensure_name_free(categories, data.name)
    category = await categories.add(Category(name=data.name))

    await cache_service.invalidate_categories()
    logger.info("category_created", category_id=category.id, name=category.name)
    return CategoryResponse.model_validate(category)


async def update_category(db: AsyncSession, category_id: int, data: CategoryCreate) -> CategoryResponse:
    """Rename a category. Keeping the current name is not a conflict."""
    category = await get_category_or_not_found(db, category_id)
    categories = CategoryRepository(db)
    await _ensure_name_free(categories, data.name, category_id)

    category.name = data.name
    category = await categories.save(category)

    # event summaries inside compilations carry the category name
    await cache_service.invalidate_categories()
    await cache_service.invalidate_compilations()
    logger.info("category_updated", category_id=category_id, name=category.name)
    return CategoryResponse.model_validate(category)


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await get_category_or_not_found(db, category_id)
    categories = CategoryRepository(db)
    if await categories.in_use(category_id):
        raise ConflictError(f"Category {category_id} is referenced by events")
    await categories.delete(category)

    await cache_service.invalidate_categories()
    logger.info("category_deleted", category_id=category_id)


async def list_categories(db: AsyncSession, offset: int, limit: int) -> list[CategoryResponse]:
    """Public category page, served from cache when possible."""
    key = cache_service.category_page_key(offset, limit)
    cached = await cache_service.get_cached(key)
    if cached is not None:
        return [CategoryResponse.model_validate(item) for item in cached]

    categories = await CategoryRepository(db).find_all(offset, limit)
    responses = [CategoryResponse.model_validate(c) for c in categories]
    await cache_service.set_cached(key, [r.model_dump(mode="json") for r in responses])
    return responses


async def get_category(db: AsyncSession, category_id: int) -> CategoryResponse:
    return CategoryResponse.model_validate(await get_category_or_not_found(db, category_id))
