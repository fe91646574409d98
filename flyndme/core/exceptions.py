"""
Errors raised while talking to Amadeus
"""

from typing import Optional


class FlyndMeError(Exception):
    """Base class for service errors"""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AmadeusAuthError(FlyndMeError):
    """Access token could not be obtained"""


class AmadeusRequestError(FlyndMeError):
    """Upstream call failed (transport error, non-2xx status or unreadable body)"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.status_code = status_code


class RateLimitedError(AmadeusRequestError):
    """Upstream answered HTTP 429"""

    def __init__(self, message: str = "Amadeus rate limit exceeded", details: Optional[dict] = None):
        super().__init__(message, status_code=429, details=details)
