class GeocodeError(Exception):
    """Base class for all errors raised by the geocoding engine."""


class ValidationError(GeocodeError, ValueError):
    """Malformed coordinate payload (missing DMS triple, non-numeric values)."""


class StoreUnavailableError(GeocodeError):
    """The cache file exists but is unreadable, corrupt or has an incompatible schema."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Geocode cache at {path} is unavailable: {reason}")


class RemoteServiceError(GeocodeError):
    """The reverse geocoding service answered with a non-success status."""

    def __init__(self, status_code, reason):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP error! Status: {status_code}. Text: {reason}")


class TransportError(GeocodeError):
    """No usable response was obtained from the reverse geocoding service."""
