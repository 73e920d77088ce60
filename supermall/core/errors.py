"""
Domain errors raised by services and translated to HTTP responses by routers
"""
from fastapi import HTTPException, status


class SuperMallError(Exception):
    """Base class for errors a caller can act on"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SuperMallError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(SuperMallError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(SuperMallError):
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(SuperMallError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(SuperMallError):
    status_code = status.HTTP_403_FORBIDDEN


def to_http_exception(error: SuperMallError) -> HTTPException:
    """Convert a domain error into the HTTPException FastAPI understands"""
    return HTTPException(status_code=error.status_code, detail=error.message)
