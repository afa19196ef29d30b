"""
Pydantic schemas for compilation-related request/response validation.
"""

from typing import Optional

from pydantic import Field

from ewm.schemas.common import CamelModel
from ewm.schemas.event import EventShortResponse


class CompilationCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=50)
    pinned: bool = False
    events: list[int] = []


class CompilationUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=50)
    pinned: Optional[bool] = None
    events: Optional[list[int]] = None


class CompilationResponse(CamelModel):
    id: int
    title: str
    pinned: bool
    events: list[EventShortResponse]
