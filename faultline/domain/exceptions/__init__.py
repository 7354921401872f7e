from .base import DomainError, ErrorKind, ForbiddenError, UnauthorizedError

__all__ = ["DomainError", "ErrorKind", "ForbiddenError", "UnauthorizedError"]
