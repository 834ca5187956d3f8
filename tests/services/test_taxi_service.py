"""
Unit tests for taxi service.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from waitstop.schemas.geo import Coordinates
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.services.taxi_service import TaxiService


@pytest.fixture
def taxi_service():
    """Create a taxi service instance for testing."""
    return TaxiService(api_url="https://tmap.test", app_key="test-key")


@pytest.fixture
def sample_coordinates():
    return {
        "origin": Coordinates(latitude=37.4979, longitude=127.0276),  # Gangnam
        "destination": Coordinates(latitude=37.5547, longitude=126.9707),  # Seoul Station
    }


@pytest.fixture
def sample_routes_response():
    """Sample TMap routes API response (first feature carries the totals)."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {
                    "totalDistance": 9800,
                    "totalTime": 1230,
                    "totalFare": 2700,
                    "taxiFare": 15000,
                },
            },
            {"type": "Feature", "properties": {"description": "우회전"}},
        ],
    }


def mock_http_client(status_code=200, payload=None, side_effect=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = ""
    client = AsyncMock()
    client.post = AsyncMock(return_value=response, side_effect=side_effect)
    return client


@pytest.mark.asyncio
async def test_get_estimate_success(taxi_service, sample_coordinates, sample_routes_response):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(payload=sample_routes_response)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert isinstance(estimate, TaxiEstimate)
    # 1230 s = 20.5 min, rounded half up
    assert estimate.duration_minutes == 21
    assert estimate.fare_amount == 15000
    assert estimate.distance_meters == 9800


@pytest.mark.asyncio
async def test_get_estimate_request_body(taxi_service, sample_coordinates, sample_routes_response):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        client = mock_http_client(payload=sample_routes_response)
        mock_get_client.return_value = client

        await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    body = client.post.call_args.kwargs["json"]
    assert body["startX"] == 127.0276
    assert body["startY"] == 37.4979
    assert body["endX"] == 126.9707
    assert body["endY"] == 37.5547
    assert body["totalValue"] == 2


@pytest.mark.asyncio
async def test_get_estimate_missing_fare_defaults_to_zero(taxi_service, sample_coordinates):
    payload = {"features": [{"properties": {"totalTime": 600, "totalDistance": 3000}}]}
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(payload=payload)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate.duration_minutes == 10
    assert estimate.fare_amount == 0


@pytest.mark.asyncio
async def test_get_estimate_rate_limited(taxi_service, sample_coordinates):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(status_code=429)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None


@pytest.mark.asyncio
async def test_get_estimate_server_error(taxi_service, sample_coordinates):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(status_code=500)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None


@pytest.mark.asyncio
async def test_get_estimate_timeout(taxi_service, sample_coordinates):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(
            side_effect=httpx.TimeoutException("timed out")
        )

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None


@pytest.mark.asyncio
async def test_get_estimate_network_error(taxi_service, sample_coordinates):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(
            side_effect=httpx.ConnectError("connection refused")
        )

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None


@pytest.mark.asyncio
async def test_get_estimate_malformed_payload(taxi_service, sample_coordinates):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(payload={"features": []})

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None


def test_health_check_requires_app_key():
    assert TaxiService("https://tmap.test", "key").health_check().healthy is True
    assert TaxiService("https://tmap.test", "").health_check().healthy is False


@pytest.mark.asyncio
async def test_close_client(taxi_service):
    mock_client = MagicMock()
    mock_client.aclose = AsyncMock()
    taxi_service._client = mock_client

    await taxi_service.close()

    mock_client.aclose.assert_called_once()
    assert taxi_service._client is None


@pytest.mark.asyncio
async def test_get_estimate_fractional_fare_is_rounded(taxi_service, sample_coordinates):
    payload = {"features": [{"properties": {"totalTime": 1200, "taxiFare": 15000.5}}]}
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(payload=payload)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is not None
    assert estimate.fare_amount == 15001
    assert estimate.duration_minutes == 20


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"features": [{"properties": ["unexpected"]}]},
        {"features": [{"properties": {"totalTime": 600, "taxiFare": "n/a"}}]},
    ],
)
async def test_get_estimate_odd_payload_is_none(taxi_service, sample_coordinates, payload):
    with patch.object(taxi_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_http_client(payload=payload)

        estimate = await taxi_service.get_estimate(
            sample_coordinates["origin"], sample_coordinates["destination"]
        )

    assert estimate is None
