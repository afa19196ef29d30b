"""
Shared schema base and the error body returned by every failing endpoint.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ewm.core.dates import DateTimeField


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; either is accepted on input."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ApiError(CamelModel):
    status: str
    reason: str
    message: str
    timestamp: DateTimeField
