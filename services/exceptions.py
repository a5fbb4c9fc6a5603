"""
Service Exceptions
Error kinds raised by the scheduling and alert engine
"""

from fastapi import status


class AdherenceEngineError(Exception):
    """Base class for errors surfaced by the engine"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AdherenceEngineError, LookupError):
    """Referenced medication, patient or caregiver does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidArgumentError(AdherenceEngineError, ValueError):
    """Malformed status, date or field value"""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AdherenceEngineError):
    """A dose was already logged for this medication, slot and day"""

    status_code = status.HTTP_409_CONFLICT


class StorageUnavailableError(AdherenceEngineError):
    """The schedule store could not be reached or failed mid-operation"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


__all__ = [
    "AdherenceEngineError",
    "NotFoundError",
    "InvalidArgumentError",
    "ConflictError",
    "StorageUnavailableError",
]
