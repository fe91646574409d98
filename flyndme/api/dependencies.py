"""
Service dependencies for FastAPI routes
"""

from flyndme.services import CheapestDestinationService


def get_destination_service() -> CheapestDestinationService:
    """
    Destination service dependency for FastAPI routes
    A new service (and HTTP session) per request, nothing is shared
    """
    return CheapestDestinationService()
