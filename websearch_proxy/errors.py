"""Exception taxonomy shared by the proxy service and the HTTP layer."""

from typing import Optional


class ProxyError(Exception):
    """Base error; ``status_code`` is the HTTP status it maps to."""

    status_code = 500


class ValidationError(ProxyError):
    """Raised when a required request parameter is missing or invalid."""

    status_code = 400


class UpstreamError(ProxyError):
    """Raised when an outbound fetch fails or returns a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class InternalError(ProxyError):
    """Raised when extraction fails unexpectedly."""
