from .exceptions import (
    AlreadyAssignedError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidItemError,
    InvalidStatusError,
    InvalidTransitionError,
    NotFoundError,
)
from .handlers import register_exception_handlers

__all__ = [
    "AlreadyAssignedError",
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "InvalidItemError",
    "InvalidStatusError",
    "InvalidTransitionError",
    "NotFoundError",
    "register_exception_handlers",
]
