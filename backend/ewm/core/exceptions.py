"""
Domain error taxonomy.

Services raise these at the point of detection, before anything is written,
so the request transaction is rolled back as a whole. The API layer maps each
class to its HTTP status (see ewm.api.errors).
"""


class EwmError(Exception):
    """Base exception for the event service."""

    status_code: int = 500
    reason: str = "Internal server error."

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(EwmError):
    """Raised when a referenced user, event, category, request or compilation is absent."""

    status_code = 404
    reason = "The required object was not found."

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id={entity_id} was not found")


class ConflictError(EwmError):
    """Raised on illegal state transitions, ownership violations and capacity limits."""

    status_code = 409
    reason = "For the requested operation the conditions are not met."


class ValidationError(EwmError):
    """Raised on malformed date ranges, unknown enum names and negative limits."""

    status_code = 400
    reason = "Incorrectly made request."


class StatsServiceError(EwmError):
    """Raised when the stats service fails or returns something we cannot correlate."""

    status_code = 500
    reason = "Stats service failure."
