"""
API models package
"""

from .schemas import (
    FlightOffer,
    DestinationAggregate,
    MultiOriginQuery,
    ErrorResponse
)

__all__ = [
    'FlightOffer',
    'DestinationAggregate',
    'MultiOriginQuery',
    'ErrorResponse'
]
