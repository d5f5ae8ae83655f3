from enum import Enum


class ErrorKind(Enum):
    PERMISSION_DENIED = "permission_denied"
    PROVIDER = "provider"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    STALE_SAMPLE = "stale_sample"

    def __str__(self):
        return self.value


class LocationError(Exception):
    """Base class for errors delivered to location observers."""

    kind = ErrorKind.PROVIDER

    def __init__(self, message: str = ""):
        super().__init__(message or str(self.kind))


class LocationPermissionDenied(LocationError):
    kind = ErrorKind.PERMISSION_DENIED


class LocationProviderError(LocationError):
    kind = ErrorKind.PROVIDER
