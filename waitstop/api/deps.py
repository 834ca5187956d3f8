from fastapi import Request

from waitstop.core.config import Settings
from waitstop.services.geocoding_service import GeocodingService
from waitstop.services.synthesis_service import HybridSynthesisEngine, JumpEstimationPolicy
from waitstop.services.taxi_service import TaxiService
from waitstop.services.transit_service import TransitService
from waitstop.services.trip_planner_service import TripPlannerService


def build_trip_planner(settings: Settings) -> TripPlannerService:
    """Wire the providers and the synthesis engine from settings, once per process."""
    timeout = settings.PROVIDER_TIMEOUT_SECONDS
    engine = HybridSynthesisEngine(
        policy=JumpEstimationPolicy(
            time_ratio=settings.SMART_JUMP_TIME_RATIO,
            time_buffer_minutes=settings.SMART_JUMP_TIME_BUFFER_MINUTES,
            fare_surcharge=settings.SMART_JUMP_FARE_SURCHARGE,
        ),
        max_candidates=settings.SMART_MAX_CANDIDATES,
        min_lead_in_minutes=settings.SMART_MIN_LEAD_IN_MINUTES,
    )
    return TripPlannerService(
        geocoding_service=GeocodingService(
            settings.TMAP_API_URL, settings.TMAP_APP_KEY, timeout=timeout
        ),
        taxi_service=TaxiService(settings.TMAP_API_URL, settings.TMAP_APP_KEY, timeout=timeout),
        transit_service=TransitService(
            settings.ODSAY_API_URL, settings.ODSAY_API_KEY, timeout=timeout
        ),
        engine=engine,
    )


def get_trip_planner(request: Request) -> TripPlannerService:
    return request.app.state.trip_planner
