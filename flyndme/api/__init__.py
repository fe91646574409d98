"""
API routes package
"""

from fastapi import APIRouter
from .flights import router as flights_router

api_router = APIRouter()
api_router.include_router(flights_router)

__all__ = ['api_router']
