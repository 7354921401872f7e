"""Domain layer - Business rules and entities"""

from .exceptions.base import (
    DomainError,
    ErrorKind,
    ForbiddenError,
    UnauthorizedError,
)

__all__ = [
    "DomainError",
    "ErrorKind",
    "ForbiddenError",
    "UnauthorizedError",
]
