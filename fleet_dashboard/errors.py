"""
Domain exceptions for the fleet dashboard.

Services raise these; routes translate them into HTTP responses:

- NotFoundError      -> 404
- ValidationFailure  -> 400
- ConflictError      -> 409
- InternalError      -> 500
"""

from typing import Optional


class FleetError(Exception):
    """Base class for all fleet dashboard errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(FleetError):
    """Raised when a task, step, vehicle, POI or material id does not resolve."""

    status_code = 404

    def __init__(self, entity: str, identifier: Optional[str] = None):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class ValidationFailure(FleetError):
    """Raised for malformed input or a violated capacity invariant."""

    status_code = 400


class ConflictError(FleetError):
    """Raised for an illegal lifecycle transition or a stale concurrent write."""

    status_code = 409


class InternalError(FleetError):
    """Raised when the backing store fails."""

    status_code = 500
