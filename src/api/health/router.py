"""Health check endpoints for debugging and monitoring."""

from fastapi import APIRouter

from src.api.core.dependencies import PredictorClientDep
from src.modules.health.service import HealthService, OverallHealthStatus
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/")
async def health_check(predictor_client: PredictorClientDep) -> OverallHealthStatus:
    """Health check covering the prediction microservice."""
    health_service = HealthService(predictor_client)
    return await health_service.run_all_checks()


@router.get("/liveness")
async def liveness_check():
    """Simple liveness check - indicates if service is running."""
    return {"status": "alive", "service": "sargazo-forecast-api"}
