"""
Service layer
"""

from .amadeus_client import AmadeusClient
from .destination_service import CheapestDestinationService

__all__ = ['AmadeusClient', 'CheapestDestinationService']
