"""
HTTP client for the stats service.
Separated from business logic for clean architecture.
"""

import time
from datetime import datetime
from typing import Optional, Sequence, Union

import httpx
from pydantic import TypeAdapter

from ewm.core.dates import format_datetime
from ewm.core.exceptions import StatsServiceError
from ewm.core.logging import get_logger
from ewm.core.metrics import record_stats_call
from ewm.services.interfaces.stats import StatsClient
from ewm_stats.schemas import HitCreate, ViewStats, uris_param

logger = get_logger(__name__)

_VIEW_STATS_LIST = TypeAdapter(list[ViewStats])


class HttpStatsClient(StatsClient):
    """
    Calls POST /hit and GET /stats on the stats service.

    No retries: a transport error, a non-2xx status or a body that does not
    parse as a list of ViewStats fails the calling request.
    """

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> httpx.Response:
        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            record_stats_call(operation, False, time.perf_counter() - start_time)
            logger.error("stats_request_failed", operation=operation, error=str(e))
            raise StatsServiceError(f"Stats service is unavailable: {e}") from e

        duration = time.perf_counter() - start_time
        if response.is_error:
            record_stats_call(operation, False, duration)
            logger.error(
                "stats_request_rejected",
                operation=operation,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise StatsServiceError(
                f"Stats service answered {operation} with status {response.status_code}"
            )

        record_stats_call(operation, True, duration)
        return response

    async def record_hit(self, hit: HitCreate) -> None:
        await self._request("hit", "POST", "/hit", json=hit.model_dump(mode="json"))
        logger.debug("stats_hit_recorded", uri=hit.uri, ip=hit.ip)

    async def query_stats(
        self,
        start: datetime,
        end: datetime,
        uris: Union[str, Sequence[str], None] = None,
        unique: bool = False,
    ) -> list[ViewStats]:
        params = {
            "start": format_datetime(start),
            "end": format_datetime(end),
            "unique": "true" if unique else "false",
        }
        joined = uris_param(uris)
        if joined:
            params["uris"] = joined

        response = await self._request("stats", "GET", "/stats", params=params)
        try:
            return _VIEW_STATS_LIST.validate_python(response.json())
        except ValueError as e:
            logger.error("stats_response_malformed", body=response.text[:500])
            raise StatsServiceError("Unexpected response body from stats service") from e
