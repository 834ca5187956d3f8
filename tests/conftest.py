import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from waitstop.api.deps import get_trip_planner
from waitstop.main import app
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.schemas.transit import TransitItinerary, TransitSegment, TransportMode
from waitstop.services.trip_planner_service import TripPlannerService

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _segment(mode: TransportMode, minutes: int, line: str = "", station: str = "", stations: int = 0):
    """Shorthand for building a transit segment in tests."""
    return TransitSegment(
        mode=mode,
        line_name=line,
        start_station_name=station,
        station_count=stations,
        duration_minutes=minutes,
    )


@pytest.fixture
def sample_itinerary():
    """Walk 5, bus 15, walk 5, subway 20: 45 minutes, 1500 won, two transfers."""
    return TransitItinerary(
        segments=[
            _segment(TransportMode.WALK, 5),
            _segment(TransportMode.BUS, 15, line="146", station="역삼동", stations=8),
            _segment(TransportMode.WALK, 5),
            _segment(TransportMode.SUBWAY, 20, line="수도권 2호선", station="강남", stations=9),
        ],
        total_duration_minutes=45,
        total_fare=1500,
        bus_transfer_count=1,
        subway_transfer_count=1,
    )


@pytest.fixture
def sample_taxi_estimate():
    return TaxiEstimate(duration_minutes=20, fare_amount=15000, distance_meters=9800.0)


@pytest.fixture
def mock_planner():
    """Trip planner with every collaborator mocked."""
    geocoding = MagicMock()
    geocoding.geocode = AsyncMock(return_value=None)
    geocoding.reverse_geocode = AsyncMock(return_value="Current Location")
    geocoding.close = AsyncMock()
    taxi = MagicMock()
    taxi.get_estimate = AsyncMock(return_value=None)
    taxi.close = AsyncMock()
    transit = MagicMock()
    transit.get_itineraries = AsyncMock(return_value=[])
    transit.close = AsyncMock()
    return TripPlannerService(
        geocoding_service=geocoding, taxi_service=taxi, transit_service=transit
    )


@pytest.fixture(scope="function")
def client(mock_planner):
    """Provides a FastAPI test client wired to the mocked trip planner."""
    app.dependency_overrides[get_trip_planner] = lambda: mock_planner

    with TestClient(app) as c:
        yield c

    # Clean up overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def make_segment():
    """Factory for transit segments."""
    return _segment
