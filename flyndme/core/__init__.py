"""
Core configuration, logging and errors
"""

from .config import settings, Settings
from .exceptions import (
    FlyndMeError,
    AmadeusAuthError,
    AmadeusRequestError,
    RateLimitedError
)
from .logging import configure_logging

__all__ = [
    'settings',
    'Settings',
    'FlyndMeError',
    'AmadeusAuthError',
    'AmadeusRequestError',
    'RateLimitedError',
    'configure_logging'
]
