import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from src.modules.prediction.infrastructure.predictor_client import PredictorClient
from src.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    service: str
    status: Literal["healthy", "unhealthy", "degraded"]
    connected: bool
    details: dict
    error: str | None = None


@dataclass
class OverallHealthStatus:
    """Overall health status with individual service results."""

    status: Literal["healthy", "degraded", "unhealthy"]
    services: dict[str, HealthCheckResult]
    timestamp: str


class HealthService:
    """Service for performing health checks on downstream dependencies."""

    def __init__(self, predictor_client: PredictorClient):
        self.predictor_client = predictor_client

    async def check_predictor_health(self) -> HealthCheckResult:
        """Prediction microservice health check."""
        try:
            reachable = await self.predictor_client.check_health()
        except Exception as e:
            logger.error(f"Predictor health check error: {e}")
            return HealthCheckResult(
                service="predictor",
                status="unhealthy",
                connected=False,
                details={},
                error=type(e).__name__,
            )

        return HealthCheckResult(
            service="predictor",
            status="healthy" if reachable else "unhealthy",
            connected=reachable,
            details={},
        )

    async def run_all_checks(self) -> OverallHealthStatus:
        """Run all health checks in parallel and return overall status."""
        results = await asyncio.gather(self.check_predictor_health())

        services = {}
        overall_status: Literal["healthy", "degraded", "unhealthy"] = "healthy"

        for result in results:
            if result.status == "unhealthy":
                overall_status = "unhealthy"
            elif result.status == "degraded" and overall_status == "healthy":
                overall_status = "degraded"
            services[result.service] = result

        return OverallHealthStatus(
            status=overall_status,
            services=services,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
