"""
CamManager - Domain Errors

Every check runs before any mutation or log entry, so catching one of
these means nothing was changed.
"""
from fastapi import HTTPException, status


class InventoryError(Exception):
    """Base class for rejected inventory operations."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self):
        return self.message


class ValidationError(InventoryError):
    """Blank or malformed required field."""


class EmptyNameError(ValidationError):
    """Taxonomy name is blank or whitespace."""


class DuplicateNameError(InventoryError):
    """Taxonomy value already exists (case-insensitive)."""
    status_code = status.HTTP_409_CONFLICT


class DuplicateIPError(InventoryError):
    """Another camera already uses this IP (case-insensitive, trimmed)."""
    status_code = status.HTTP_409_CONFLICT


class DuplicateUsernameError(InventoryError):
    """Another account already uses this username."""
    status_code = status.HTTP_409_CONFLICT


class InUseError(InventoryError):
    """Taxonomy value is still referenced by devices."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str, cameras: int = 0, recorders: int = 0):
        super().__init__(message)
        self.cameras = cameras
        self.recorders = recorders

    def to_detail(self):
        return {
            "message": self.message,
            "cameras": self.cameras,
            "recorders": self.recorders,
        }


class InvalidCredentialsError(InventoryError):
    """Username/password pair does not match any account."""
    status_code = status.HTTP_401_UNAUTHORIZED


class StorageError(Exception):
    """The durable key-value store could not be read or written."""


def to_http_exception(exc: InventoryError) -> HTTPException:
    """Translate a domain error into the HTTP error returned to the client."""
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())
