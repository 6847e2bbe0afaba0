"""Exceptions for location resolution."""


class LocationError(Exception):
    """Base class for recoverable location-resolution failures."""


class ServiceError(LocationError):
    """Raised when the geocoding service cannot be reached or misbehaves."""


class NotFound(LocationError):
    """Raised when the geocoding service understood the request but found nothing."""


class PositionError(LocationError):
    """Raised when the device position cannot be determined."""

    default_message = "Unable to detect your location."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Denied(PositionError):
    default_message = "Unable to detect your location. Please check your browser permissions."


class Timeout(PositionError):
    default_message = "Detecting your location took too long. Please try again."


class Unavailable(PositionError):
    default_message = "Geolocation is not supported on this device."
