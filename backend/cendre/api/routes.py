"""
Main API router configuration.
"""

from fastapi import APIRouter
from cendre.api.endpoints import secrets

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(secrets.router, tags=["secrets"])
