"""
Compilation service: admin-curated event collections.

Responses embed event summaries with the stored view counts; the stats
service is not queried for compilations.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.exceptions import ConflictError, NotFoundError
from ewm.core.logging import get_logger
from ewm.models import Compilation
from ewm.repositories import CompilationRepository, EventRepository
from ewm.schemas.compilation import CompilationCreate, CompilationResponse, CompilationUpdate
from ewm.services import cache_service, event_mapper
from ewm.services.lookups import get_compilation_or_not_found

logger = get_logger(__name__)


async def _ensure_events_exist(db: AsyncSession, event_ids: list[int]) -> None:
    found = {e.id for e in await EventRepository(db).get_many(event_ids)}
    missing = sorted(set(event_ids) - found)
    if missing:
        raise NotFoundError("Event", missing[0])


async def _ensure_title_free(compilations: CompilationRepository, title: str, compilation_id=None) -> None:
    existing = await compilations.get_by_title(title)
    if existing is not None and existing.id != compilation_id:
        raise ConflictError(f"Compilation title '{title}' is already in use")


async def _to_responses(db: AsyncSession, compilations: list[Compilation]) -> list[CompilationResponse]:
    members = await CompilationRepository(db).event_ids(c.id for c in compilations)
    all_ids = {event_id for ids in members.values() for event_id in ids}
    events = await EventRepository(db).get_many(all_ids)
    summaries = {s.id: s for s in await event_mapper.to_short_responses(db, events)}

    return [
        CompilationResponse(
            id=c.id,
            title=c.title,
            pinned=c.pinned,
            events=[summaries[event_id] for event_id in members[c.id]],
        )
        for c in compilations
    ]


async def _to_response(db: AsyncSession, compilation: Compilation) -> CompilationResponse:
    return (await _to_responses(db, [compilation]))[0]


async def create_compilation(db: AsyncSession, data: CompilationCreate) -> CompilationResponse:
    compilations = CompilationRepository(db)
    await _ensure_title_free(compilations, data.title)
    await _ensure_events_exist(db, data.events)

    compilation = await compilations.add(Compilation(title=data.title, pinned=data.pinned))
    await compilations.set_events(compilation.id, data.events)

    await cache_service.invalidate_compilations()
    logger.info("compilation_created", compilation_id=compilation.id, events=len(set(data.events)))
    return await _to_response(db, compilation)


async def update_compilation(
    db: AsyncSession, compilation_id: int, data: CompilationUpdate
) -> CompilationResponse:
    """Partial update; a given `events` list replaces the membership."""
    compilation = await get_compilation_or_not_found(db, compilation_id)
    compilations = CompilationRepository(db)
    if data.title is not None:
        await _ensure_title_free(compilations, data.title, compilation_id)
    if data.events is not None:
        await _ensure_events_exist(db, data.events)

    if data.title is not None:
        compilation.title = data.title
    if data.pinned is not None:
        compilation.pinned = data.pinned
    compilation = await compilations.save(compilation)
    if data.events is not None:
        await compilations.set_events(compilation_id, data.events)

    await cache_service.invalidate_compilations()
    logger.info("compilation_updated", compilation_id=compilation_id)
    return await _to_response(db, compilation)


async def delete_compilation(db: AsyncSession, compilation_id: int) -> None:
    compilation = await get_compilation_or_not_found(db, compilation_id)
    await CompilationRepository(db).delete(compilation)
    await cache_service.invalidate_compilations()
    logger.info("compilation_deleted", compilation_id=compilation_id)


async def list_compilations(
    db: AsyncSession, pinned: Optional[bool], offset: int, limit: int
) -> list[CompilationResponse]:
    key = cache_service.compilation_page_key(pinned, offset, limit)
    cached = await cache_service.get_cached(key)
    if cached is not None:
        return [CompilationResponse.model_validate(item) for item in cached]

    compilations = await CompilationRepository(db).find_all(pinned, offset, limit)
    responses = await _to_responses(db, compilations)
    await cache_service.set_cached(key, [r.model_dump(mode="json") for r in responses])
    return responses


async def get_compilation(db: AsyncSession, compilation_id: int) -> CompilationResponse:
    return await _to_response(db, await get_compilation_or_not_found(db, compilation_id))
