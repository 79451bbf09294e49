"""API Routes module"""
from fastapi import APIRouter

from .automations import router as automations_router

# Main API router
api_router = APIRouter()

api_router.include_router(automations_router, prefix="/automations", tags=["Automations"])

__all__ = ["api_router"]
