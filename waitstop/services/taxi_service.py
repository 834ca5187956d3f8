"""
Taxi Estimate Service

Fetches a point-to-point driving route from the TMap routes API and reduces it
to a taxi time/fare estimate.
"""

import logging
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from waitstop.schemas.geo import Coordinates
from waitstop.schemas.health import ServiceHealth
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

# Ask TMap for the taxi fare alongside time and distance
TOTAL_VALUE_WITH_TAXI_FARE = 2


class TaxiService:
    """
    Service for taxi estimates.

    Never raises on provider failure: rate limiting, HTTP errors and malformed
    payloads all yield ``None`` ("taxi unavailable").
    """

    def __init__(self, api_url: str, app_key: str, timeout: float = 10.0):
        self._api_url = api_url
        self._app_key = app_key
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._api_url,
                headers={"appKey": self._app_key, "Accept": "application/json"},
                timeout=self._timeout,
            )
        return self._client

    def health_check(self) -> ServiceHealth:
        if not self._app_key:
            return ServiceHealth(healthy=False, message="TMap app key is not configured")
        return ServiceHealth(healthy=True, message="TMap routing is configured")

    async def get_estimate(
        self, origin: Coordinates, destination: Coordinates
    ) -> Optional[TaxiEstimate]:
        """
        Estimate taxi time and fare between two points.

        Args:
            origin: Coordinates of the starting point
            destination: Coordinates of the destination point

        Returns:
            TaxiEstimate, or None if the provider failed or returned no route
        """
        body = {
            "startX": origin.longitude,
            "startY": origin.latitude,
            "endX": destination.longitude,
            "endY": destination.latitude,
            "totalValue": TOTAL_VALUE_WITH_TAXI_FARE,
        }

        try:
            response = await self._get_client().post(
                "/routes", params={"version": "1"}, json=body
            )
        except httpx.TimeoutException:
            logger.error("Request to TMap routes API timed out")
            return None
        except httpx.HTTPError as e:
            logger.error("Network error while contacting TMap routes API: %s", str(e))
            return None

        if response.status_code == 429:
            logger.warning("TMap API rate limit exceeded, taxi estimate unavailable")
            return None
        if response.status_code != 200:
            logger.error("TMap routes API returned status %s: %s", response.status_code, response.text)
            return None

        try:
            return self._parse_estimate(response.json())
        except (
            ArithmeticError,
            AttributeError,
            KeyError,
            IndexError,
            TypeError,
            ValueError,
            ValidationError,
        ) as e:
            logger.error("Failed to parse TMap routes response: %s", str(e))
            return None

    def _parse_estimate(self, data: Dict) -> TaxiEstimate:
        properties = data["features"][0]["properties"]
        return TaxiEstimate(
            duration_minutes=round_half_up(properties["totalTime"] / 60),
            fare_amount=round_half_up(properties.get("taxiFare") or 0),
            distance_meters=properties.get("totalDistance") or 0,
        )

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
