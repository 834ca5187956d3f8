from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from waitstop.api.deps import get_trip_planner
from waitstop.core.config import settings
from waitstop.schemas.health import HealthCheckResponse
from waitstop.services.trip_planner_service import TripPlannerService

router = APIRouter()


@router.get("/health")
async def health_check(
    planner: TripPlannerService = Depends(get_trip_planner),
) -> HealthCheckResponse:
    """
    Health check endpoint that verifies every upstream provider is configured:
    - TMap geocoding
    - TMap taxi routing
    - ODsay transit search

    Returns 200 if all providers are usable, 503 otherwise.
    """
    geocoding_health = planner.geocoding_service.health_check()
    taxi_health = planner.taxi_service.health_check()
    transit_health = planner.transit_service.health_check()

    overall_healthy = all([geocoding_health.healthy, taxi_health.healthy, transit_health.healthy])

    response = HealthCheckResponse(
        service="waitstop-backend",
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        healthy=overall_healthy,
        geocoding_service=geocoding_health,
        taxi_service=taxi_health,
        transit_service=transit_health,
    )

    if overall_healthy:
        return response
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response.model_dump()
    )
