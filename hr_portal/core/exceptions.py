from typing import Dict, List, Optional

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ServiceError):
    """Malformed or missing input. Carries optional per-field messages."""

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None) -> None:
        super().__init__(message, 422)
        self.errors = errors or {}


class AuthorizationError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class BusinessRuleError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class StateError(BusinessRuleError):
    """Transition attempted from a status that does not permit it."""


class NotFoundError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class StorageError(ServiceError):
    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def to_http_exception(e: ServiceError) -> HTTPException:
    """Map a service error to the HTTPException raised by routers. 5xx details are never exposed."""
    if e.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=e.status_code, detail="Internal server error")
    if isinstance(e, ValidationError) and e.errors:
        return HTTPException(status_code=e.status_code, detail={"message": e.message, "errors": e.errors})
    return HTTPException(status_code=e.status_code, detail=e.message)
