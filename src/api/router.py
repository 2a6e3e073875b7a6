from fastapi import APIRouter

from src.api.coordinates.router import router as coordinates_router
from src.api.health.router import router as health_router

# Main API router
api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(coordinates_router)
