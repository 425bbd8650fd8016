"""
Domain errors raised by Gigboard services.
Each maps to one HTTP status in the API layer.
"""

from typing import List, Optional


class GigboardError(Exception):
    """Base exception for all marketplace domain errors."""

    status_code = 400
    error_code = "GIGBOARD_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def details(self) -> dict:
        return {}


class ValidationError(GigboardError):
    """Malformed or out-of-range input, raised before any write."""

    status_code = 422
    error_code = "VALIDATION_ERROR"

    def __init__(self, errors, message: Optional[str] = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__(message or "; ".join(self.errors))

    @property
    def details(self) -> dict:
        return {"errors": self.errors}


class ConflictError(GigboardError):
    """Uniqueness violation or a transition the current state does not allow."""

    status_code = 409
    error_code = "CONFLICT"


class CapacityExceededError(ConflictError):
    """Approving would push an event past its required_people."""

    error_code = "CAPACITY_EXCEEDED"


class NotFoundError(GigboardError):
    """Referenced entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

    @property
    def details(self) -> dict:
        return {"entity": self.entity, "id": self.entity_id}


class AuthorizationError(GigboardError):
    """Actor lacks the role or membership the operation requires."""

    status_code = 403
    error_code = "FORBIDDEN"
