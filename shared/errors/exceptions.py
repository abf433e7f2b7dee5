"""
Domain error taxonomy shared by every service.

Services raise these instead of HTTPException so the business layer stays
framework-agnostic; `register_exception_handlers` maps them to responses.
"""
from fastapi import status


class DomainError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "DOMAIN_ERROR"
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "Not authorized"


class InvalidTransitionError(DomainError):
    code = "INVALID_TRANSITION"
    default_message = "Order cannot move to the requested state"


class InvalidStatusError(DomainError):
    code = "INVALID_STATUS"
    default_message = "Invalid status"


class InvalidItemError(DomainError):
    code = "INVALID_ITEM"
    default_message = "Invalid menu item"


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Resource already exists"


class AlreadyAssignedError(ConflictError):
    code = "ALREADY_ASSIGNED"
    default_message = "Order already assigned to another rider"
