"""
Pydantic schemas for user-related request/response validation.
"""

from pydantic import EmailStr, Field

from ewm.schemas.common import CamelModel


class UserCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=250)
    email: EmailStr = Field(..., min_length=6, max_length=254)


class UserResponse(CamelModel):
    id: int
    name: str
    email: str


class UserShortResponse(CamelModel):
    id: int
    name: str
