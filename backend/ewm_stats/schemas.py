"""
Wire contract of the stats service, shared with the client in the event service.
"""

from typing import Optional, Sequence, Union

from pydantic import Field

from ewm.core.dates import DateTimeField
from ewm.schemas.common import CamelModel


class HitCreate(CamelModel):
    app: str = Field(..., min_length=1, max_length=255)
    uri: str = Field(..., min_length=1, max_length=2048)
    ip: str = Field(..., min_length=1, max_length=64)
    timestamp: DateTimeField


class ViewStats(CamelModel):
    app: str
    uri: str
    hits: int


def split_uris(uris: Union[str, Sequence[str], None]) -> list[str]:
    """Flatten a single URI, a comma-joined string or a list of either."""
    if uris is None:
        return []
    if isinstance(uris, str):
        uris = [uris]
    result: list[str] = []
    for item in uris:
        result.extend(part.strip() for part in item.split(",") if part.strip())
    return result


def uris_param(uris: Union[str, Sequence[str], None]) -> Optional[str]:
    joined = ",".join(split_uris(uris))
    return joined or None
